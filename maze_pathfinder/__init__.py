"""Maze Path Finder - step-by-step grid search visualizer engine.

This package implements depth-first search, breadth-first search, Dijkstra's
algorithm and A* over a 4-connected grid, exposing each run as a sequence of
discrete steps so a rendering layer can animate the exploration.
"""

__version__ = "1.0.0"
__author__ = "Maze Path Finder"
