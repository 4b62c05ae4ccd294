import dataclasses

import pytest

from sbfupload.types import (
    ConnectionType,
    DayData,
    DeviceClass,
    ErrorCode,
    InverterDataType,
    LriDef,
    MonthData,
    S123Command,
    SmaDataType,
)


def test_connection_type_lookup():
    assert ConnectionType(2) is ConnectionType.ETHERNET
    assert ConnectionType.BLUETOOTH == 1


def test_s123_command_ordering():
    values = [cmd.value for cmd in S123Command]
    assert values == sorted(values)
    assert S123Command(4) is S123Command.STATE


def test_inverter_data_type_members_are_single_bits():
    for flag in InverterDataType:
        assert InverterDataType(flag.value) is flag
        assert bin(flag.value).count("1") == 1


def test_inverter_data_type_members_are_distinct():
    values = [flag.value for flag in InverterDataType.__members__.values()]
    assert len(values) == len(set(values))
    assert InverterDataType(1 << 0) is InverterDataType.ENERGY_PRODUCTION
    assert InverterDataType(1 << 1) is InverterDataType.SPOT_DC_POWER
    assert InverterDataType(1 << 3) is InverterDataType.SPOT_AC_POWER


def test_inverter_data_type_combination():
    combo = InverterDataType(0b1010)
    assert combo == InverterDataType.SPOT_AC_POWER | InverterDataType.SPOT_DC_POWER
    assert InverterDataType.SPOT_AC_POWER in combo
    assert InverterDataType.SPOT_DC_POWER in combo
    assert InverterDataType.ENERGY_PRODUCTION not in combo


def test_sbftest_is_top_bit():
    assert InverterDataType(1 << 31) is InverterDataType.SBFTEST
    assert InverterDataType.SBFTEST == 1 << 31


def test_device_class_lookup():
    assert DeviceClass(8065) is DeviceClass.ELECTRICITY_METER
    assert DeviceClass.SOLAR_INVERTER == 8001


def test_device_class_unknown_raises():
    with pytest.raises(ValueError):
        DeviceClass(1)


def test_sma_data_type_lookup():
    assert SmaDataType(64) is SmaDataType.SLONG
    assert SmaDataType(16) is SmaDataType.STRING


def test_error_code_lookup():
    assert ErrorCode(-7) is ErrorCode.INVALID_PASSWORD
    assert ErrorCode(21) is ErrorCode.LRI_NOT_AVAILABLE
    assert ErrorCode.OK == 0


def test_error_code_unknown_raises():
    with pytest.raises(ValueError):
        ErrorCode(-99)


def test_error_codes_below_ok_are_negative():
    failures = {ErrorCode(value) for value in range(-13, 0)}
    assert all(code < 0 for code in failures)
    assert failures | {ErrorCode(0), ErrorCode(21)} == set(ErrorCode)


def test_lri_values_are_unique():
    values = [lri.value for lri in LriDef.__members__.values()]
    assert len(values) == len(set(values))
    assert {LriDef(value) for value in values} == set(LriDef)


def test_lri_low_byte_is_zero():
    for lri in LriDef:
        assert LriDef(lri.value & 0x00FFFF00) is lri


def test_lri_known_values():
    assert LriDef.GridMsTotW == 0x00263F00
    assert LriDef(0x00260100) is LriDef.MeteringTotWhOut


def test_month_data_is_frozen():
    entry = MonthData(datetime=1000, total_wh=5000, day_wh=20)
    with pytest.raises(dataclasses.FrozenInstanceError):
        entry.day_wh = 30  # type: ignore[misc]
    assert entry.total_wh == 5000


def test_month_data_defaults_and_equality():
    assert MonthData(datetime=7) == MonthData(datetime=7, total_wh=0, day_wh=0)


def test_day_data_replace_round_trip():
    entry = DayData(datetime=300, total_wh=1200, watt=450)
    changed = dataclasses.replace(entry, watt=0)
    assert changed.watt == 0
    assert dataclasses.replace(changed, watt=450) == entry