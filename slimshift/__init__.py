"""
SlimShift: an interactive command-line video converter.

SlimShift makes sure a local FFmpeg build is available, lets the user pick a
codec family, encoder, preset and quality, and then drives FFmpeg to
re-encode a video while showing progress.

Layout:
    config/:   static settings, encoder catalog data and download URLs.
    domain/:   value types and the exception hierarchy.
    services/: toolchain install, encoder probing, argument building and
               the FFmpeg conversion runner.
    pipeline/: the interactive menu flow that ties the services together.
    ui/:       the rich-based terminal prompter.
    utils/:    process, formatting and platform folder helpers.
"""

__version__ = "1.0.0"
