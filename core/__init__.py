# Core package - foundational components
#
# Modules:
# - config: Application settings
# - logging: Structured logging
# - storage: Pluggable Record Store backends (SQLite, PostgreSQL, MongoDB)
