"""PID water-level control, sensor filtering and a serial receive buffer for a tank."""

__version__ = "0.1.0"
__all__ = ["pid", "serial_link", "tank"]