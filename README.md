# sbfupload

`sbfupload` is a library for uploading the day readings of SMA inverters,
kept in a local database, to PVOutput in batches. It reads a small key/value
configuration file, asks PVOutput which limits the account has, sends the
pending data points of each configured system, and tells the database which
points PVOutput accepted.

The database side is not part of the package: you supply it as an object
with a handful of methods (see "The database side" below).

## The configuration file

`sbfupload.config.read_settings(me, filename)` reads the settings and returns
a `Configuration`. `me` is the path of the running program. When `filename`
is empty, `SBFspotUpload.cfg` is read from the directory that `me` is in.
Lines have the form `key=value`; keys are not case sensitive and anything
after a `#` is ignored.

```
# Directory for the daily log file SBFspotUpload<YYYYMMDD>.log.
# A trailing slash is added when missing. Leave it out to log to the console.
LogDir=/var/log/sbfupload/
# debug | info | warning | error (default info)
LogLevel=info

# inverter serial : PVOutput system id, comma separated
PVoutput_SID=1000000001:10001,1000000002:10002
PVoutput_Key=placeholder

SQL_Database=/home/pi/smadata/inverters.db
# seconds between database polls, 60 to 3600 (default 300)
SQL_QueryInterval=300
```

The keys `SQL_Hostname`, `SQL_Username`, `SQL_Password` and `SQL_Port`
(default 3306) are read as well and kept on the `Configuration` for a
database that needs them.

`PVoutput_SID`, `PVoutput_Key` and `SQL_Database` are required; on Windows
`LogDir` is required too. A missing required setting, a file that cannot be
opened, an unknown log level, or a serial, system id, port or interval that
is not an unsigned number raises `ConfigError`, which carries the message and,
where it applies, the line number and file path. A line without exactly one
`=` is reported on standard error and skipped. Unknown keys give a warning and
are skipped. A query interval outside 60 to 3600 gives a warning and falls
back to 300.

```python
from sbfupload.config import ConfigError, read_settings

try:
    cfg = read_settings("/usr/local/bin/sbfupload", "")
except ConfigError as exc:
    print(exc)
else:
    print(cfg.pvo_sids, cfg.sql_query_interval, cfg.log_level)
```

## Talking to PVOutput

```python
from sbfupload.pvoutput import PVOutput, PVOutputError

with PVOutput(10001, "placeholder", 30) as client:
    try:
        client.get_system_data()
    except PVOutputError as exc:
        print("PVOutput request failed:", exc)

    print(client.http_status, client.system_name)
    print(client.is_supporter(), client.is_team_member())
    print(client.batch_datelimit(), client.batch_statuslimit(), client.batch_ratelimit())
```

Accounts that have donated may send 100 status points per batch and go back
90 days (rate limit 100); other accounts may send 30 points and go back 14
days (rate limit 60). `is_team_member()` checks for team 613.

`get_system_data()` fetches the system details, teams and donations and keeps
them in `client.system`, a `SystemData`. `parse_system_data(text)` does the
same parsing on a raw `getsystem` answer without any network access, and
raises `PVOutputError` when the answer is malformed.
`add_batch_status(data)` posts one batch of `date,time,energy,power;...`
points and returns the answer text; its HTTP status is left in
`client.http_status`. A failed transfer raises `PVOutputError`.

## The upload loop

`sbfupload.service.UploadService(config, open_store, make_client)` runs the
uploads. `open_store(config)` returns the database object; `make_client`
builds a client for a system id and defaults to `PVOutput`.

- `run_once()` makes one pass over all configured systems, in serial order,
  and returns how many batches PVOutput accepted.
- `run()` repeats the pass once every query interval until `stop()` is
  called. `stop()` may be called from another thread or a signal handler.

At most every two hours the service refreshes the account limits from
PVOutput and stores them, together with the time of the next check, under the
config keys `Batch_DateLimit`, `Batch_StatusLimit` and `NextStatusCheck`.
`describe_upload(data, datapoints, verbose)` builds the log line announcing
an upload.

### The database side

`UploadStore` describes what the loop needs from the database. Each method
raises an exception when the database reports an error.

- `get_config(key)` returns the stored string, or `None`
- `set_config(key, value)`
- `batch_get_archdaydata(serial, datelimit, statuslimit)` returns
  `(data, datapoints)`: the pending points for `serial` and their count
- `batch_set_pvoflag(response, serial)` marks the points acknowledged in
  PVOutput's answer as uploaded
- `close()`

## Running as a daemon

`sbfupload.daemon` puts the pieces together:

- `parse_args(argv)` returns the file given with `-c` / `--config-file`, or
  `""`; unknown options raise `getopt.GetoptError`.
- `check_schema(store, minimum)` reads the `SchemaVersion` config value and
  raises `SchemaError` when it is below `minimum`.
- `run(argv, open_store, minimum_schema)` reads the configuration, opens the
  store, checks the schema and then runs an `UploadService` until the process
  receives SIGTERM. It returns `EXIT_SUCCESS` (0) or `EXIT_FAILURE` (1).

```python
from sbfupload.daemon import run

exit_code = run(["-c", "/etc/sbfupload/SBFspotUpload.cfg"], open_store=my_open_store)
```

## What the package does not do

The package has no database backend of its own: it does not read an SQLite
or MySQL database. Without an `open_store` function, `run` and
`sbfupload.daemon.main` report that the database cannot be opened and return
`EXIT_FAILURE`, so no command-line program is installed. It also does not
install itself as a system service, and it does not talk to inverters.

## Smaller pieces

- `sbfupload.uploadlog`: `log(config, text, level)` appends a line with a
  `timestamp(now)` prefix (`[HH:MM:SS.mmm] `) to the daily log file in
  `config.log_dir`, or prints to standard output when no log directory is set
  outside Windows. Messages below `config.log_level` are dropped. It returns
  whether the message was written. Levels come from `LogLevel`.
- `sbfupload.records`: `Rec40Att` and `Rec40S32` hold decoded inverter
  records and can be built from their little-endian wire form with
  `from_bytes`. `lri()` masks the record identifier, and
  `Rec40S32.actual_power_limit_pct()` gives the current power limit as a
  percentage of the maximum. `is_nan(value, kind)` recognises the
  not-a-number markers for `s16`, `u16`, `s32`, `u32`, `s64` and `u64`.
  `djb_hash(text)` is Bernstein's string hash as a 64-bit value.
- `sbfupload.types`: enumerations of the inverter protocol, such as `LriDef`,
  `DeviceClass`, `InverterDataType` and `ErrorCode`, and the `DayData` and
  `MonthData` records.