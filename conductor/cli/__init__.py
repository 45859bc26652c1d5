"""
Conductor CLI - developer tools for conductor applications

Commands:
- conductor run - Mount a root store, dispatch events and show the resulting state
- conductor version - Show version information
"""
