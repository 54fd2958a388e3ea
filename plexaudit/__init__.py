"""
plexaudit - cross-check a Plex library against TMDb and against itself
"""
