"""
Style catalog.
Maps a style id to the descriptor text that conditions prompt expansion.
"""
from types import MappingProxyType
from typing import Dict, List, Optional

DEFAULT_STYLE = "photo"

STYLE_PROMPTS = MappingProxyType({
    "photo": (
        "Editorial photography style, natural lighting, shallow depth of field, "
        "magazine quality, atmospheric and evocative, 4K, high resolution, "
        "professional photograph"
    ),
    "illustration": (
        "Hand-painted gouache illustration with visible brushstrokes, soft painterly "
        "style inspired by Studio Ghibli, warm atmospheric lighting, dreamy and "
        "whimsical, artistic illustration"
    ),
    "3d": (
        "Cinema 4D style 3D render, soft lighting, pastel colors, abstract geometric "
        "shapes, clean minimalist composition, octane render quality, isometric 3D art"
    ),
    "minimal": (
        "Minimalist graphic design, solid color blocks, simple geometric shapes, "
        "clean composition, Bauhaus inspired, modern flat design aesthetic"
    ),
})


def resolve_style(style_id: Optional[str]) -> str:
    """Return the descriptor for style_id, falling back to the photo style."""
    if not style_id or style_id not in STYLE_PROMPTS:
        style_id = DEFAULT_STYLE
    return STYLE_PROMPTS[style_id]


def list_styles() -> List[Dict[str, str]]:
    return [
        {"id": style_id, "description": descriptor}
        for style_id, descriptor in STYLE_PROMPTS.items()
    ]
