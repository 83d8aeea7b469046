APP_NAME = "Patch Exporter"
APP_VERSION = "1.0.0-dev"

DEFAULT_PREFS_FILE = "~/.patcher/export_paths.json"
DEFAULT_MANIFEST_NAME = "manifest.json"
DEFAULT_REPORT_NAME = "report.html"
