"""Shared enumerations and record types for SMA inverter data."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum, IntFlag

__all__ = [
    "ConnectionType",
    "S123Command",
    "InverterDataType",
    "DeviceClass",
    "SmaDataType",
    "ErrorCode",
    "LriDef",
    "MonthData",
    "DayData",
]


class ConnectionType(IntEnum):
    """How the inverter is reached."""

    NONE = 0
    BLUETOOTH = 1
    ETHERNET = 2


class S123Command(IntEnum):
    """Commands understood by the 123Solar logger interface."""

    NOP = 0  # No operation
    DATA = 1  # Send spot data frame
    INFO = 2  # Send program/inverter information
    SYNC = 3  # Synchronize inverter
    STATE = 4  # Send inverter state data


class InverterDataType(IntFlag):
    """Groups of values that can be requested from an inverter."""

    ENERGY_PRODUCTION = 1 << 0
    SPOT_DC_POWER = 1 << 1
    SPOT_DC_VOLTAGE = 1 << 2
    SPOT_AC_POWER = 1 << 3
    SPOT_AC_VOLTAGE = 1 << 4
    SPOT_GRID_FREQUENCY = 1 << 5
    SPOT_DC_POWER_2 = 1 << 6  # SB 1600TL-10
    SPOT_AC_POWER_2 = 1 << 7  # SB 1600TL-10
    SPOT_AC_TOTAL_POWER = 1 << 8
    TYPE_LABEL = 1 << 9
    OPERATION_TIME = 1 << 10
    SOFTWARE_VERSION = 1 << 11
    DEVICE_STATUS = 1 << 12
    GRID_RELAY_STATUS = 1 << 13
    BATTERY_CHARGE_STATUS = 1 << 14
    BATTERY_INFO = 1 << 15
    INVERTER_TEMPERATURE = 1 << 16
    METERING_GRID_MS_TOT_W = 1 << 17
    SBFTEST = 1 << 31


class DeviceClass(IntEnum):
    """Device classes reported by SMA devices."""

    ALL_DEVICES = 8000  # DevClss0
    SOLAR_INVERTER = 8001  # DevClss1
    WIND_TURBINE_INVERTER = 8002  # DevClss2
    BATTERY_INVERTER = 8007  # DevClss7
    CHARGING_STATION = 8008  # DevClss8
    HYBRID_INVERTER = 8009  # DevClss9
    CONSUMER = 8033  # DevClss33
    SENSOR_SYSTEM = 8064  # DevClss64
    ELECTRICITY_METER = 8065  # DevClss65
    GAS_METER = 8066  # DevClss66
    GENERIC_METER = 8067  # DevClss67
    TRACKER = 8096  # DevClss96
    COMMUNICATION_PRODUCT = 8128  # DevClss128


class SmaDataType(IntEnum):
    """Data types used in SMA value records."""

    ULONG = 0
    STATUS = 8
    STRING = 16
    FLOAT = 32
    SLONG = 64


class ErrorCode(IntEnum):
    """Result codes of inverter communication."""

    LRI_NOT_AVAILABLE = 21  # Requested LRI not available
    OK = 0  # No error
    NO_DATA = -1  # Receive buffer empty
    BAD_ARG = -2  # Unknown command line argument
    CHECKSUM = -3  # Invalid checksum
    BUFFER_OVERFLOW = -4  # Buffer overflow
    ARCH_NO_DATA = -5  # No archived data found for given timespan
    INIT = -6  # Unable to initialise
    INVALID_PASSWORD = -7  # Invalid password
    RETRY = -8  # Retry the last action
    EOF = -9  # End of data
    PRIVILEGE = -10  # Privilege not held (need installer login)
    LOGON_FAILED = -11  # Deprecated: logon failed, other than invalid password
    COMM = -12  # General communication error
    FW_VERSION = -13  # Incompatible firmware version


class LriDef(IntEnum):
    """Logical record identifiers of inverter values."""

    OperationHealth = 0x00214800  # Condition (INV_STATUS)
    CoolsysTmpNom = 0x00237700  # Operating condition temperatures
    DcMsWatt = 0x00251E00  # DC power input
    MeteringTotWhOut = 0x00260100  # Total yield
    MeteringDyWhOut = 0x00262200  # Day yield
    GridMsTotW = 0x00263F00  # Power
    BatChaStt = 0x00295A00  # Current battery charge status
    OperationHealthSttOk = 0x00411E00  # Nominal power in Ok mode
    OperationHealthSttWrn = 0x00411F00  # Nominal power in Warning mode
    OperationHealthSttAlm = 0x00412000  # Nominal power in Fault mode
    OperationGriSwStt = 0x00416400  # Grid relay/contactor
    OperationRmgTms = 0x00416600  # Waiting time until feed-in
    DcMsVol = 0x00451F00  # DC voltage input
    DcMsAmp = 0x00452100  # DC current input
    MeteringPvMsTotWhOut = 0x00462300  # PV generation counter reading
    MeteringGridMsTotWhOut = 0x00462400  # Grid feed-in counter reading
    MeteringGridMsTotWhIn = 0x00462500  # Grid reference counter reading
    MeteringCsmpTotWhIn = 0x00462600  # Meter reading consumption meter
    MeteringGridMsDyWhOut = 0x00462700
    MeteringGridMsDyWhIn = 0x00462800
    MeteringTotOpTms = 0x00462E00  # Operating time
    MeteringTotFeedTms = 0x00462F00  # Feed-in time
    MeteringGriFailTms = 0x00463100  # Power outage
    MeteringWhIn = 0x00463A00  # Absorbed energy
    MeteringWhOut = 0x00463B00  # Released energy
    MeteringPvMsTotWOut = 0x00463500  # PV power generated
    MeteringGridMsTotWOut = 0x00463600  # Power grid feed-in
    MeteringGridMsTotWIn = 0x00463700  # Power grid reference
    MeteringCsmpTotWIn = 0x00463900  # Consumer power
    GridMsWphsA = 0x00464000  # Power L1
    GridMsWphsB = 0x00464100  # Power L2
    GridMsWphsC = 0x00464200  # Power L3
    GridMsPhVphsA = 0x00464800  # Grid voltage phase L1
    GridMsPhVphsB = 0x00464900  # Grid voltage phase L2
    GridMsPhVphsC = 0x00464A00  # Grid voltage phase L3
    GridMsAphsA_1 = 0x00465000  # Grid current phase L1
    GridMsAphsB_1 = 0x00465100  # Grid current phase L2
    GridMsAphsC_1 = 0x00465200  # Grid current phase L3
    GridMsAphsA = 0x00465300  # Grid current phase L1 (alternative)
    GridMsAphsB = 0x00465400  # Grid current phase L2 (alternative)
    GridMsAphsC = 0x00465500  # Grid current phase L3 (alternative)
    GridMsHz = 0x00465700  # Grid frequency
    MeteringSelfCsmpSelfCsmpWh = 0x0046AA00  # Energy consumed internally
    MeteringSelfCsmpActlSelfCsmp = 0x0046AB00  # Current self-consumption
    MeteringSelfCsmpSelfCsmpInc = 0x0046AC00  # Current rise in self-consumption
    MeteringSelfCsmpAbsSelfCsmpInc = 0x0046AD00  # Rise in self-consumption
    MeteringSelfCsmpDySelfCsmpInc = 0x0046AE00  # Rise in self-consumption today
    BatDiagCapacThrpCnt = 0x00491E00  # Number of battery charge throughputs
    BatDiagTotAhIn = 0x00492600  # Amp hours counter for battery charge
    BatDiagTotAhOut = 0x00492700  # Amp hours counter for battery discharge
    BatTmpVal = 0x00495B00  # Battery temperature
    BatVol = 0x00495C00  # Battery voltage
    BatAmp = 0x00495D00  # Battery current
    NameplateLocation = 0x00821E00  # Device name
    NameplateMainModel = 0x00821F00  # Device class
    NameplateModel = 0x00822000  # Device type
    NameplateAvalGrpUsr = 0x00822100  # Unknown
    NameplatePkgRev = 0x00823400  # Software package
    InverterWLim = 0x00832A00  # Maximum active power device
    GridMsPhVphsA2B6100 = 0x00464B00
    GridMsPhVphsB2C6100 = 0x00464C00
    GridMsPhVphsC2A6100 = 0x00464D00


@dataclass(frozen=True)
class MonthData:
    """One day's entry of a month archive."""

    datetime: int
    total_wh: int = 0
    day_wh: int = 0


@dataclass(frozen=True)
class DayData:
    """One five-minute entry of a day archive."""

    datetime: int
    total_wh: int = 0
    watt: int = 0