"""Centralized user-facing text for the gorn CLI."""

from __future__ import annotations


class Styles:
    ERROR = "red"
    WARNING = "yellow"
    SUCCESS = "green"
    INFO = "dim"
    TITLE = "bold cyan"
    TABLE_HEADER = "bold magenta"


class Messages:
    APP_HELP = (
        "Gorn – offer executables on PATH (most recently used first) to a menu "
        "program and launch the selection. Arguments are forwarded to the menu."
    )
    HELP_LAUNCH = "Run a launcher session; extra arguments go to the menu program."
    HELP_CACHE = "Inspect, refresh, or clear the cached PATH index."
    HELP_CACHE_SHOW = "Show cached directories and their executable counts."
    HELP_CACHE_CLEAR = "Delete the cache file (history included)."
    HELP_CACHE_REFRESH = "Rescan changed PATH directories and save the cache."
    HELP_HISTORY = "List launched commands, most recent first."
    HELP_HISTORY_CLEAR = "Forget every launched command."
    HELP_HISTORY_PRUNE = "Drop history entries whose executable no longer resolves."
    HELP_HISTORY_LIMIT = "Maximum number of entries to display (0 = all)."
    HELP_CONFIG = "Show or change gorn configuration."
    HELP_CONFIG_SHOW = "Show current configuration."
    HELP_SET_MENU = "Set the menu program (e.g. dmenu, rofi, bemenu)."
    HELP_RESET_MENU = "Restore the default menu program."
    HELP_DOCTOR = "Run diagnostic checks for the menu program and cache."

    ERROR_UNRESOLVED = "Cannot find `{name}` on PATH; nothing was launched."
    ERROR_MENU_UNAVAILABLE = "Unable to run menu program `{command}` ({reason})."
    ERROR_LAUNCH_FAILED = "Failed to launch {path} ({reason})."
    ERROR_MENU_EMPTY = "Menu program must not be empty."
    ERROR_CONFIG_INVALID = "Config file {path} could not be parsed ({reason})."

    INFO_CACHE_PATH = "Cache file: {path}"
    INFO_CACHE_EMPTY = "No cached directories yet. Run `gorn cache --refresh`."
    INFO_CACHE_CLEARED = "Removed cache file {path}."
    INFO_CACHE_CLEAR_NONE = "No cache file found at {path}."
    INFO_CACHE_REFRESHED = "Rescanned {count} director{plural}; cache saved."
    INFO_HISTORY_EMPTY = "History is empty."
    INFO_HISTORY_CLEARED = "Cleared {count} history entr{plural}."
    INFO_HISTORY_PRUNED = "Pruned {count} history entr{plural}."
    INFO_MENU_SET = "Menu program set to {value}."
    INFO_MENU_RESET = "Menu program reset to {value}."
    INFO_CONFIG_SUMMARY = (
        "Menu program: {menu}\n"
        "History limit: {limit}\n"
        "Config file: {config}\n"
        "Cache file: {cache}"
    )

    TABLE_TITLE = "Cached PATH directories"
    TABLE_HEADER_DIRECTORY = "Directory"
    TABLE_HEADER_EXECUTABLES = "Executables"
    TABLE_HEADER_MTIME = "Modified"
    TABLE_HEADER_ON_PATH = "On PATH"
    TABLE_HISTORY_TITLE = "Launch history"
    TABLE_HEADER_INDEX = "#"
    TABLE_HEADER_COMMAND = "Command"

    DOCTOR_TITLE = "Gorn Doctor v{version}"
    DOCTOR_MENU_FOUND = "`{command}` found at {path}"
    DOCTOR_MENU_MISSING = "`{command}` not found on PATH"
    DOCTOR_MENU_MISSING_DETAIL = "Install it or choose another with `gorn config --set-menu`."
    DOCTOR_CACHE_CREATED = "Created cache directory {path}"
    DOCTOR_CACHE_CANNOT_CREATE = "Cannot create cache directory {path}"
    DOCTOR_CACHE_WRITABLE = "Cache directory {path} is writable"
    DOCTOR_CACHE_NOT_WRITABLE = "Cache directory {path} is not writable"
    DOCTOR_CACHE_FILE_OK = "Cache file holds {dirs} director{plural} and {history} history entr{hplural}"
    DOCTOR_CACHE_FILE_MISSING = "No cache file yet; it is created on the first launch"
    DOCTOR_CACHE_FILE_INVALID = "Cache file {path} is unreadable and will be rebuilt"
    DOCTOR_PATH_OK = "{count} searchable director{plural} on PATH"
    DOCTOR_PATH_EMPTY = "PATH has no searchable directories"
    DOCTOR_PATH_EMPTY_DETAIL = "Entries equal to `.` or empty entries are ignored."
    DOCTOR_ALL_PASSED = "All checks passed."
    DOCTOR_SOME_FAILED = "Some checks failed."
