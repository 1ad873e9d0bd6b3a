"""Debug configuration - Edit this file to control debug logging

To enable debug logging:
1. Set ENABLE_DEBUG = True
2. Choose which categories to enable in ENABLED_CATEGORIES
3. Restart the application

Available categories:
- 'buffer': Screen buffer reads and line reconstruction
- 'prompt': Prompt stripping and command extraction
- 'commands': Command capture and shelf mutations
- 'suggestions': Ghost text suggestions and ranking
- 'geometry': Suggestion placement and overlay layout
- 'persistence': Loading and saving the shelf
- 'keys': Keyboard input sent to the process
- 'terminal': PTY and shell process
- 'ui': UI events and interactions
- 'performance': Performance metrics
- 'error': Errors and exceptions
"""

# Master switch - set to True to enable debug logging
ENABLE_DEBUG = False

# Enable all categories (overrides ENABLED_CATEGORIES if True)
ENABLE_ALL = False

# List of enabled categories (only used if ENABLE_ALL is False)
ENABLED_CATEGORIES = [
    # 'buffer',
    # 'prompt',
    # 'commands',
    # 'suggestions',
    # 'geometry',
    # 'persistence',
    # 'keys',
    # 'terminal',
    # 'ui',
    # 'performance',
    # 'error',
]

# Quick presets - uncomment one to use
# ENABLED_CATEGORIES = ['prompt', 'suggestions', 'geometry']  # Ghost text debugging
# ENABLED_CATEGORIES = ['commands', 'persistence']  # Shelf debugging
