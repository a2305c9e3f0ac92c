"""Constants shared by the openmw.cfg loading and writing machinery.

This module defines the file layout and the directive vocabulary of the
configuration format.
"""

# Name of the configuration file looked up in every chain directory
CONFIG_FILENAME = "openmw.cfg"

# Name of the application directory under the platform default locations
APP_DIRNAME = "openmw"

# Comment marker
COMMENT_CHAR = "#"

# Quoting rules for directory values
QUOTE_CHAR = '"'
ESCAPE_CHAR = "&"

# Path tokens
TOKEN_USERDATA = "?userdata?"
TOKEN_USERCONFIG = "?userconfig?"

# Directive keys
KEY_DATA = "data"
KEY_USERDATA = "user-data"
KEY_DATA_LOCAL = "data-local"
KEY_RESOURCES = "resources"
KEY_CONFIG = "config"
KEY_CONTENT = "content"
KEY_ARCHIVE = "fallback-archive"
KEY_GROUNDCOVER = "groundcover"
KEY_FALLBACK = "fallback"
KEY_ENCODING = "encoding"
KEY_REPLACE = "replace"

# Targets of the replace= directive
REPLACE_CONTENT = "content"
REPLACE_DATA = "data"
REPLACE_FALLBACK = "fallback"
REPLACE_ARCHIVES = "fallback-archives"
REPLACE_GROUNDCOVER = "groundcover"
REPLACE_DATA_LOCAL = "data-local"
REPLACE_RESOURCES = "resources"
REPLACE_USERDATA = "user-data"
REPLACE_CONFIG = "config"

# Synthetic data directories derived from resources=
VFS_DIRS = ("vfs", "vfs-mw")

# Serializer format marker, always the last line of a written file
SERIALIZER_VERSION = "1.0"
TRAILER = f"# Serialized by openmw-config {SERIALIZER_VERSION}"

# Throwaway file used to probe directory writability
WRITE_PROBE = ".openmw_cfg_write_test"

# Environment variable enabling chain traversal debug output
DEBUG_ENV = "CFG_DEBUG"
