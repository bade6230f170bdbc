import pytest

from tankpid.tank import (
    INTERVAL_MS,
    WATER_LEVEL_MAX,
    WATER_LEVEL_MIN,
    LevelSensor,
    PumpAction,
    Rotation,
    TankController,
    adjust_target,
    echo_to_distance_mm,
    format_report,
    pump_action,
)


class FixedRoll:
    def __init__(self, value):
        self.value = value

    def randrange(self, stop):
        return self.value


def quiet_sensor():
    return LevelSensor(rng=FixedRoll(0))


def ticks_for(distance):
    ticks = 0
    while echo_to_distance_mm(ticks) < distance:
        ticks += 1
    return ticks


def test_zero_echo_is_zero_distance():
    assert echo_to_distance_mm(0) == 0


def test_distance_monotonic():
    values = [echo_to_distance_mm(t) for t in range(0, 5000, 37)]
    assert values == sorted(values)


def test_negative_echo_rejected():
    with pytest.raises(ValueError):
        echo_to_distance_mm(-1)


def test_adjust_target_steps():
    assert adjust_target(110, Rotation.CLOCKWISE) == 110 + 1
    assert adjust_target(110, Rotation.COUNTER_CLOCKWISE) == 110 - 1


def test_adjust_target_clamps():
    assert adjust_target(WATER_LEVEL_MAX, Rotation.CLOCKWISE) == WATER_LEVEL_MAX
    assert adjust_target(WATER_LEVEL_MIN, Rotation.COUNTER_CLOCKWISE) == WATER_LEVEL_MIN
    assert adjust_target(0, Rotation.CLOCKWISE) == WATER_LEVEL_MIN
    assert adjust_target(0, Rotation.COUNTER_CLOCKWISE) == WATER_LEVEL_MAX


@pytest.mark.parametrize("output, action", [
    (1.5, PumpAction.OFF),
    (-1.5, PumpAction.OFF),
    (0.0, PumpAction.OFF),
    (1.6, PumpAction.ADD_WATER),
    (-1.6, PumpAction.REMOVE_WATER),
])
def test_pump_action(output, action):
    assert pump_action(output) is action


def test_format_report_order_and_truncation():
    assert format_report(100.7, -3.9, 5.2, 110) == "100,5,-3,110\n"


def test_sensor_first_read_passes_through():
    sensor = quiet_sensor()
    ticks = ticks_for(300)
    assert sensor.read(ticks) == echo_to_distance_mm(ticks)


def test_sensor_rejects_large_jump():
    sensor = quiet_sensor()
    first = sensor.read(ticks_for(300))
    assert sensor.read(ticks_for(200)) == first


def test_sensor_accepts_small_change():
    sensor = quiet_sensor()
    sensor.read(ticks_for(300))
    assert sensor.read(ticks_for(301)) == echo_to_distance_mm(ticks_for(301))


def test_sensor_glitch_returns_previous():
    sensor = LevelSensor(rng=FixedRoll(225))
    assert sensor.read(ticks_for(300)) == 0


def test_step_waits_for_interval():
    tank = TankController(sensor=quiet_sensor())
    assert tank.step(INTERVAL_MS - 1, ticks_for(300)) is None


def test_step_reports_and_drives_pumps():
    tank = TankController(sensor=quiet_sensor())
    tank.rx.push(ord("x"))
    ticks = ticks_for(300)
    report = tank.step(INTERVAL_MS, ticks)
    measured = 347 - echo_to_distance_mm(ticks)
    assert report.startswith(f"{measured},")
    assert report.endswith(f",{tank.target}\n")
    assert tank.pump is PumpAction.ADD_WATER
    assert tank.rx.is_empty()


def test_step_out_of_range_level_ignored():
    tank = TankController(sensor=quiet_sensor())
    assert tank.step(INTERVAL_MS, ticks_for(20)) is None
    assert tank.pump is PumpAction.OFF


def test_turn_changes_target():
    tank = TankController(sensor=quiet_sensor())
    start = tank.target
    assert tank.turn(Rotation.CLOCKWISE) == start + 1
    assert tank.turn(Rotation.COUNTER_CLOCKWISE) == start