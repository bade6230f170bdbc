"""Discrete PID controller with a band-limited derivative and anti-windup."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class PIDController:
    """PID controller using trapezoidal integration and derivative on measurement.

    The integrator is clamped to ``[lim_min_int, lim_max_int]`` and the output
    to ``[lim_min, lim_max]``. ``sample_time`` is in seconds.
    """

    kp: float
    ki: float
    kd: float
    tau: float
    lim_min: float
    lim_max: float
    lim_min_int: float
    lim_max_int: float
    sample_time: float

    integrator: float = field(default=0.0, init=False)
    prev_error: float = field(default=0.0, init=False)
    differentiator: float = field(default=0.0, init=False)
    prev_measurement: float = field(default=0.0, init=False)
    out: float = field(default=0.0, init=False)

    def reset(self) -> None:
        """Clear the controller memory and output."""
        self.integrator = 0.0
        self.prev_error = 0.0
        self.differentiator = 0.0
        self.prev_measurement = 0.0
        self.out = 0.0

    def update(self, setpoint: float, measurement: float) -> tuple[float, float]:
        """Advance the controller one sample; return ``(output, error)``."""
        error = setpoint - measurement
        proportional = self.kp * error

        self.integrator += 0.5 * self.ki * self.sample_time * (error + self.prev_error)
        if self.integrator > self.lim_max_int:
            self.integrator = self.lim_max_int
        elif self.integrator < self.lim_min_int:
            self.integrator = self.lim_min_int

        # Derivative acts on the measurement, hence the leading minus sign.
        self.differentiator = -(
            2.0 * self.kd * (measurement - self.prev_measurement)
            + (2.0 * self.tau - self.sample_time) * self.differentiator
        ) / (2.0 * self.tau + self.sample_time)

        output = proportional + self.integrator + self.differentiator
        if output > self.lim_max:
            output = self.lim_max
        elif output < self.lim_min:
            output = self.lim_min
        self.out = output

        self.prev_error = error
        self.prev_measurement = measurement
        return output, error