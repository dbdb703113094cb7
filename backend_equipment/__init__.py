"""
Backend Equipment — risk scoring and alert debouncing for industrial equipment.

Each sensor reading (temperature, vibration, load) is normalized, scored and
classified into LOW/MEDIUM/HIGH/CRITICAL. Alert history is written only when
a reading matters (any non-LOW level, or a return to LOW), and HIGH/CRITICAL
assessments are pushed to live subscribers.
"""

__version__ = "0.1.0"
