"""Line grammar for the diagram definition language."""
