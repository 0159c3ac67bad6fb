"""
Qt user interface: main window, shared cursor and canvases.
"""
