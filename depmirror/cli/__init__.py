"""
CLI commands, registered on the group in depmirror.main.
"""
