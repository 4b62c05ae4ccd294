import pytest
import requests
import responses

from sbfupload.pvoutput import (
    ADD_BATCH_STATUS_URL,
    GET_SYSTEM_URL,
    PVOutput,
    PVOutputError,
    parse_system_data,
)

MAIN = "Roof,4500,1234,18,250,PanelCo,1,5000,InvCo,N,30.5,No,20120101,-33.5,151.25,5"
EXTRA = "a,b,c,d,e,f,g,h,i,j,k,l"


def body(main=MAIN, teams="613,7", donations="1", extra=EXTRA):
    return f"{main};;{teams};{donations};{extra}"


@pytest.fixture
def mocked():
    with responses.RequestsMock() as rsps:
        yield rsps


def test_parse_full_answer():
    data = parse_system_data(body())
    assert data.system_name == "Roof"
    assert data.system_size == 4500
    assert data.postcode == "1234"
    assert data.inverter_brand == "InvCo"
    assert data.array_tilt == 30.5
    assert data.location == (-33.5, 151.25)
    assert data.status_interval == 5
    assert data.teams == [613, 7]
    assert data.donations == 1


def test_parse_extra_pairs_start_at_seven():
    data = parse_system_data(body())
    assert sorted(data.ext_data) == [7, 8, 9, 10, 11, 12]
    assert data.ext_data[7] == ("a", "b")
    assert data.ext_data[12] == ("k", "l")


def test_parse_wrong_extra_count_ignored():
    data = parse_system_data(body(extra="a,b"))
    assert data.ext_data == {}


def test_parse_wrong_main_count_keeps_defaults():
    data = parse_system_data(body(main="Roof,4500"))
    assert data.system_name == ""
    assert data.teams == [613, 7]


def test_parse_skips_empty_teams():
    data = parse_system_data(body(teams=",613,"))
    assert data.teams == [613]


@pytest.mark.parametrize("text", ["a;b", "a;b;c;d;e;f", ""])
def test_parse_wrong_section_count(text):
    with pytest.raises(PVOutputError):
        parse_system_data(text)


def test_parse_bad_number_in_main():
    with pytest.raises(PVOutputError):
        parse_system_data(body(main=MAIN.replace("4500", "big")))


def test_parse_bad_team():
    with pytest.raises(PVOutputError):
        parse_system_data(body(teams="613,x"))


def test_parse_bad_donations():
    with pytest.raises(PVOutputError):
        parse_system_data(body(donations="-1"))


def test_defaults_before_fetch():
    client = PVOutput(42, "placeholder", 30)
    assert not client.is_team_member()
    assert not client.is_supporter()
    assert client.batch_statuslimit() == 30
    assert client.batch_datelimit() == 14
    assert client.batch_ratelimit() == 60


def test_get_system_data_sends_headers_and_query(mocked):
    mocked.add(responses.POST, GET_SYSTEM_URL, body=body(), status=200)
    client = PVOutput(42, "placeholder", 30)
    data = client.get_system_data()
    request = mocked.calls[0].request
    assert request.headers["X-Pvoutput-SystemId"] == "42"
    assert request.headers["X-Pvoutput-Apikey"] == "placeholder"
    assert request.body == b"teams=1&donations=1&ext=1"
    assert data.system_name == "Roof"
    assert client.system_name == "Roof"
    assert client.http_status == 200


def test_supporter_and_member_limits(mocked):
    mocked.add(responses.POST, GET_SYSTEM_URL, body=body(), status=200)
    client = PVOutput(42, "placeholder", 30)
    client.get_system_data()
    assert client.is_team_member()
    assert client.is_supporter()
    assert client.batch_statuslimit() == 100
    assert client.batch_datelimit() == 90
    assert client.batch_ratelimit() == 100


def test_non_member_without_donations(mocked):
    mocked.add(
        responses.POST, GET_SYSTEM_URL, body=body(teams="5", donations="0"), status=200
    )
    client = PVOutput(42, "placeholder", 30)
    client.get_system_data()
    assert not client.is_team_member()
    assert client.batch_statuslimit() == 30
    assert client.batch_datelimit() == 14


def test_get_system_data_forbidden(mocked):
    mocked.add(responses.POST, GET_SYSTEM_URL, body="Forbidden", status=403)
    client = PVOutput(42, "placeholder", 30)
    with pytest.raises(PVOutputError) as info:
        client.get_system_data()
    assert info.value.http_status == 403
    assert client.http_status == 403


def test_get_system_data_connection_error(mocked):
    mocked.add(
        responses.POST, GET_SYSTEM_URL, body=requests.ConnectionError("down")
    )
    client = PVOutput(42, "placeholder", 30)
    with pytest.raises(PVOutputError):
        client.get_system_data()


def test_add_batch_status_posts_data(mocked):
    mocked.add(responses.POST, ADD_BATCH_STATUS_URL, body="20240101,10:00,1", status=200)
    with PVOutput(42, "placeholder", 30) as client:
        answer = client.add_batch_status("20240101,10:00,100,200")
        assert client.http_status == 200
    assert answer == "20240101,10:00,1"
    assert mocked.calls[0].request.body == b"c1=1&data=20240101,10:00,100,200"


def test_add_batch_status_error_status_returns_body(mocked):
    mocked.add(responses.POST, ADD_BATCH_STATUS_URL, body="Bad request", status=400)
    client = PVOutput(42, "placeholder", 30)
    answer = client.add_batch_status("x")
    assert answer == "Bad request"
    assert client.http_status == 400


def test_add_batch_status_connection_error(mocked):
    mocked.add(
        responses.POST, ADD_BATCH_STATUS_URL, body=requests.ConnectionError("down")
    )
    client = PVOutput(42, "placeholder", 30)
    with pytest.raises(PVOutputError):
        client.add_batch_status("x")