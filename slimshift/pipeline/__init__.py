"""
This package contains the interactive flow of SlimShift, which shows the menu
and coordinates the services for each action.
"""
