"""Constants shared by the parser, the lookup table and callers."""

FALLBACK_MIME_TYPE = "application/octet-stream"

# Characters separating the MIME type and its suffixes on a mime.types line
DELIMITERS = " \t,;"
COMMENT_CHAR = "#"

# Category prefixes used by the is_* predicates
VIDEO_PREFIX = "video/"
AUDIO_PREFIX = "audio/"
IMAGE_PREFIX = "image/"
TEXT_PREFIX = "text/"

# Images
PNG = "image/png"
JPEG = "image/jpeg"
GIF = "image/gif"
SVG = "image/svg+xml"
# Video
MP4 = "video/mp4"
OGG_VIDEO = "video/ogg"
# Audio
MP3 = "audio/mpeg"
OGG_AUDIO = "audio/ogg"
# Documents and data
JSON = "application/json"
XML = "application/xml"
PDF = "application/pdf"
ZIP = "application/zip"
# Text
HTML = "text/html"
CSS = "text/css"
JAVASCRIPT = "text/javascript"
PLAIN_TEXT = "text/plain"
# Other
OCTET_STREAM = FALLBACK_MIME_TYPE
