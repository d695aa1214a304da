"""
Employee roster -- application layer.

Package layout:
    services/   Application services (event bus, employee command surface)
    paths.py    Data directory resolution
    main.py     Command-line entry point
"""
