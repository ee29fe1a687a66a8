# settings.py

# Generator identity
GENERATOR_NAME = "pixelforge"
GENERATOR_VERSION = "1.0.0"

# Randomness
DEFAULT_SEED = 12345

# Canvas sizes (pixels)
SPRITE_SIZE = 48
EQUIPMENT_SIZE = 64
GEM_CANVAS_SIZE = 32
GEM_SIZE = 12
ICON_SIZE = 48
PROJECTILE_SIZE = 32
HERO_SIZE = 128
ENEMY_SIZE = 128
VFX_SIZE = 64
TERRAIN_TILE_SIZE = 64
ENCOUNTER_MARKER_SIZE = 32

# Outline
OUTLINE_COLOR = 0x000000
OUTLINE_THICKNESS = 2

# Background textures
SKY_MIN_WIDTH = 2048
LAYER_MIN_WIDTH = 4096
MID_PATTERN_WIDTH = 1024
GROUND_PATTERN_WIDTH = 1024
FOREGROUND_PATTERN_WIDTH = 800

# Output
OUTPUT_DIR = "generated"
