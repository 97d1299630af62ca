"""
Utilities Package for SlimShift.

Modules:
    - process_utils.py: runs short helper commands (tar, chmod, ffmpeg checks).
    - format_utils.py: human-readable sizes and durations.
    - platform_utils.py: locates the user's Videos and Documents folders.
"""
