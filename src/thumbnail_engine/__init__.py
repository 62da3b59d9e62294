"""
Thumbnail Engine for blog post social cards.

Modules:
  config      - Layout parameters, presets and config file loading
  errors      - MissingAsset / InvalidConfiguration / EncodingFailure
  layout      - Cover-fit and badge placement arithmetic
  processor   - Background effects (grayscale, vignette, opacity)
  compositor  - Canvas composition: background, title, badges, JPEG output
  fonts       - Font archive download and installation
  workspace   - Asset and output paths next to the background image
"""
