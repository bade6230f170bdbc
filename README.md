# tankpid

This package controls the water level of a tank. The level is read by an
ultrasonic echo sensor. The package has three modules:

- `tankpid.pid` holds `PIDController`, a discrete PID controller:
  - Integration is trapezoidal, and the integrator is clamped.
  - The derivative is band-limited and is taken on the measurement.
  - The output is clamped to the configured limits.
- `tankpid.serial_link` holds the serial parts:
  - `RxRingBuffer` is a fixed-size receive ring buffer.
  - `baud_divisor(f_cpu, baud)` computes the baud-rate register value for an
    8N1 link.
- `tankpid.tank` holds the control loop:
  - `echo_to_distance_mm` converts echo timer ticks to a distance.
  - `LevelSensor` filters the readings.
  - `adjust_target` applies a knob step to the setpoint.
  - `pump_action` chooses what the pumps do.
  - `format_report` builds the status line.
  - `TankController` ties these parts together.

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## PID controller

```python
from tankpid.pid import PIDController

pid = PIDController(
    kp=1.0, ki=0.1, kd=0.05, tau=0.2,
    lim_min=-20.0, lim_max=20.0,
    lim_min_int=-10.0, lim_max_int=10.0,
    sample_time=0.48,
)
output, error = pid.update(setpoint=110.0, measurement=100.0)
pid.reset()  # clear integrator, differentiator, previous values and output
```

`update` returns a tuple `(output, error)`:

- `output` is the clamped controller output. It is also kept in `pid.out`.
- `error` is `setpoint - measurement`.

## Tank loop

```python
from tankpid.tank import TankController, Rotation

controller = TankController()
controller.turn(Rotation.CLOCKWISE)            # target 110 -> 111 mm
line = controller.step(now_ms=60, duration_ticks=3000)
print(line, controller.pump)
```

### Target level

- The target starts at 110 mm.
- `turn` moves the target by one step. The result is clamped to the range
  10–330 mm.

### What `step` does

`step` returns `None` in two cases:

- Fewer than 60 ms have passed since the last processed sample.
- The measured level is outside the range `0 < level < 130` mm. The measured
  level is the tank height, 347 mm, minus the distance the sensor reads.

Otherwise `step` does the following:

1. It updates the PID controller.
2. It sets `controller.pump` to a `PumpAction`:
   - `ADD_WATER` when the output is above 1.5.
   - `REMOVE_WATER` when the output is below -1.5.
   - `OFF` otherwise.
3. It clears the receive buffer.
4. It returns the report line.

The report line has the form `level,output,error,target\n`. Each value in it
is truncated to an integer, as `format_report` does.

### Sensor filtering

`LevelSensor.read(duration_ticks)` converts the echo duration to a distance.
Each timer tick is 0.5 µs. It then filters the reading:

- When the new reading differs from the last accepted one by more than 2 mm,
  the previous value is kept.
- The previous value is also kept on a random glitch, with a chance of 1 in
  500. You can pass your own random source as `LevelSensor(rng=...)`.

The last seven readings are kept in `sensor.history`.

## Serial receive buffer

```python
from tankpid.serial_link import RxRingBuffer, baud_divisor

rx = RxRingBuffer()        # 64 bytes by default
rx.push(0x41)
assert rx.get() == 0x41
assert rx.is_empty()
assert baud_divisor(16_000_000, 9600) == 103
```

How the buffer behaves:

- `get` raises `IndexError` when the buffer is empty.
- `clear` discards any bytes that have not been read.
- Writes do not check for overflow.

## What this package does not do

The package only does the computation. It does not talk to any hardware:

- It does not open a serial port.
- It does not read a sensor or a rotary encoder.
- It does not drive pumps or LEDs.

Your own code has to do these things. It passes echo durations, knob
rotations and timestamps to `TankController`, and it acts on
`controller.pump` and the returned report lines.

There is no command-line program.