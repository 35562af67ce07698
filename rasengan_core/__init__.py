"""Motion, trail, camera and export building blocks for the Rasengan effect."""
