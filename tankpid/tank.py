"""Water-tank level control: sonar reading, target knob, pumps and reporting."""

from __future__ import annotations

import enum
import random
from collections import deque
from typing import Optional, Protocol

from tankpid.pid import PIDController
from tankpid.serial_link import RxRingBuffer

SPEED_OF_SOUND_MM_US = 0.343
WATER_TANK_HEIGHT_MM = 347.0
WATER_LEVEL_MIN = 10
WATER_LEVEL_MAX = 330
NUM_MEASUREMENTS = 7
INTERVAL_MS = 60
INITIAL_TARGET_MM = 110

PID_KP = 1.0
PID_KI = 0.1
PID_KD = 0.05
PID_TAU = 0.2
PID_LIM_MIN = -20.0
PID_LIM_MAX = 20.0
PID_LIM_MIN_INT = -10.0
PID_LIM_MAX_INT = 10.0
SAMPLE_TIME_S = 0.48

PUMP_THRESHOLD = 1.5
MAX_JUMP_MM = 2
_GLITCH_RANGE = 500
_GLITCH_VALUE = 225
_UINT32 = 1 << 32


class Rotation(enum.Enum):
    """Direction the target-level knob was turned."""

    CLOCKWISE = "clockwise"
    COUNTER_CLOCKWISE = "counter_clockwise"


class PumpAction(enum.Enum):
    """What the pumps do for a given controller output."""

    ADD_WATER = "add_water"
    REMOVE_WATER = "remove_water"
    OFF = "off"


class _Random(Protocol):
    def randrange(self, stop: int) -> int: ...


def echo_to_distance_mm(duration_ticks: int) -> int:
    """Convert an echo pulse length in timer ticks (0.5 us each) to millimetres."""
    if duration_ticks < 0:
        raise ValueError("echo duration cannot be negative")
    echo_us = duration_ticks * 32768 // 65536
    return int(echo_us * SPEED_OF_SOUND_MM_US / 2.0)


def adjust_target(target: int, rotation: Rotation) -> int:
    """Move the target level one step and clamp it to the allowed range."""
    if rotation is Rotation.CLOCKWISE:
        if target != 0:
            target += 1
    else:
        target = (target - 1) % _UINT32
    return max(WATER_LEVEL_MIN, min(WATER_LEVEL_MAX, target))


def pump_action(control_output: float) -> PumpAction:
    """Choose the pump action for a controller output."""
    if control_output > PUMP_THRESHOLD:
        return PumpAction.ADD_WATER
    if control_output < -PUMP_THRESHOLD:
        return PumpAction.REMOVE_WATER
    return PumpAction.OFF


def format_report(measured_level: float, error: float, control_output: float,
                  target_level: float) -> str:
    """Build the CSV status line: level, output, error, target."""
    fields = (measured_level, control_output, error, target_level)
    return ",".join(str(int(v)) for v in fields) + "\n"


class LevelSensor:
    """Sonar distance reader that rejects jumps and occasional random glitches."""

    def __init__(self, rng: Optional[_Random] = None) -> None:
        self._rng = rng if rng is not None else random.Random()
        self.prev_measurement = 0
        self.difference = 0.0
        self.history: deque[int] = deque([0] * NUM_MEASUREMENTS, maxlen=NUM_MEASUREMENTS)

    def read(self, duration_ticks: int) -> int:
        """Return the filtered distance to the water surface in millimetres."""
        distance = echo_to_distance_mm(duration_ticks)
        if self.prev_measurement != 0:
            self.difference = abs(distance - self.prev_measurement)
        glitch = self._rng.randrange(_GLITCH_RANGE) == _GLITCH_VALUE
        if self.difference > MAX_JUMP_MM or glitch:
            distance = self.prev_measurement
        else:
            self.prev_measurement = distance
        self.history.append(distance)
        return distance


class TankController:
    """Periodic control loop for the tank level."""

    def __init__(self, sensor: Optional[LevelSensor] = None,
                 rx: Optional[RxRingBuffer] = None) -> None:
        self.sensor = sensor if sensor is not None else LevelSensor()
        self.rx = rx if rx is not None else RxRingBuffer()
        self.pid = PIDController(PID_KP, PID_KI, PID_KD, PID_TAU,
                                 PID_LIM_MIN, PID_LIM_MAX,
                                 PID_LIM_MIN_INT, PID_LIM_MAX_INT,
                                 SAMPLE_TIME_S)
        self.target = INITIAL_TARGET_MM
        self.pump = PumpAction.OFF
        self.previous_ms = 0

    def turn(self, rotation: Rotation) -> int:
        """Apply one knob step and return the new target."""
        self.target = adjust_target(self.target, rotation)
        return self.target

    def step(self, now_ms: int, duration_ticks: int) -> Optional[str]:
        """Run one loop pass; return the report line when a sample was processed."""
        if now_ms - self.previous_ms < INTERVAL_MS:
            return None
        self.previous_ms = now_ms

        remaining = WATER_TANK_HEIGHT_MM - self.sensor.read(duration_ticks)
        if remaining <= 0:
            return None
        measured = int(remaining)
        if not 0 < measured < 130:
            return None

        output, error = self.pid.update(self.target, measured)
        self.pump = pump_action(output)
        report = format_report(measured, error, output, self.target)
        self.rx.clear()
        return report