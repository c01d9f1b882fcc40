"""Use-case layer for the map view workflows.

Each module wraps exactly one port call and collapses adapter failures into a
``UseCaseError`` without performing transport I/O directly.
"""
