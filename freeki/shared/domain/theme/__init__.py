"""Theme palettes, style variables and the theme applier."""
