"""Real-time relay for the motor control UI and actuator devices."""
