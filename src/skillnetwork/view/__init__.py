"""
The VIEW layer: Qt widgets and the QTimer frame source.
It only reads RenderSnapshots and never touches the simulation arrays.
"""
