"""
Configuration settings related to input video files.

Defines the file extensions recognised as video when validating the input
path, and the container extension chosen per encoder family.
"""

# Extensions treated as video input. Anything else only triggers a warning,
# since FFmpeg can read many more containers than listed here.
VIDEO_EXTENSIONS = (
    ".wmv", ".ts", ".mp4", ".mov", ".mpg", ".mpeg", ".mkv", ".avi",
    ".m2ts", ".rmvb", ".3gp", ".flv", ".vob", ".webm", ".m4v", ".asf", ".mts",
)

# --- Output Container Settings ---
MP4_EXTENSION = ".mp4"
WEBM_EXTENSION = ".webm"
MKV_EXTENSION = ".mkv"
FALLBACK_EXTENSION = MP4_EXTENSION

# Folder names looked up under the home directory when the OS gives no
# better answer. macOS calls the Videos folder "Movies".
VIDEOS_FOLDER_NAMES = {
    "darwin": "Movies",
    "default": "Videos",
}
DOCUMENTS_FOLDER_NAME = "Documents"
