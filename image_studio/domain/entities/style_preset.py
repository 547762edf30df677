"""Style preset entity - keyword bundles appended to a prompt."""

from dataclasses import dataclass


@dataclass(frozen=True)
class StylePreset:
    """A named set of style keywords."""

    name: str
    keywords: str
    category: str


def _presets(category: str, *entries: tuple[str, str]) -> list[StylePreset]:
    return [StylePreset(name=name, keywords=keywords, category=category) for name, keywords in entries]


STYLE_PRESETS: tuple[StylePreset, ...] = tuple(
    _presets(
        "Photographic & Realistic",
        ("Photography", "professional photography, 8k, sharp focus, high detail, photorealistic"),
        ("Realistic", "realistic, lifelike, ultra-detailed, unreal engine, octane render"),
        ("Cinematic", "cinematic, dramatic lighting, epic composition, photorealistic, 4k"),
        ("Vintage Photo", "vintage photograph, sepia, grainy, 1950s aesthetic, retro"),
        ("Black & White", "black and white photography, monochrome, high contrast, dramatic shadows"),
        ("Macro Photography", "macro photography, close-up, extreme detail, shallow depth of field"),
        ("Long Exposure", "long exposure photography, light trails, motion blur, silky water"),
        ("Golden Hour", "golden hour, soft warm light, sunrise, sunset, beautiful lighting"),
    )
    + _presets(
        "Digital & 3D Art",
        ("3D Render", "3d render, octane render, high detail, physically based rendering, blender"),
        ("Digital Art", "digital painting, concept art, fantasy, intricate details, artstation"),
        ("Voxel Art", "voxel art, 3D pixels, isometric, minecraft style, cubes"),
        ("Low Poly", "low poly, geometric, stylized 3D, vibrant colors"),
        ("Isometric", "isometric, 3D, diorama, detailed, high-angle shot"),
        ("Cyberpunk", "cyberpunk, neon-drenched, futuristic, dystopian, high-tech"),
        ("Steampunk", "steampunk, victorian, gears and cogs, brass and copper, mechanical"),
    )
    + _presets(
        "Traditional Art & Illustration",
        ("Anime", "anime style, vibrant colors, detailed line art, manga aesthetic"),
        ("Manga", "manga style, black and white, screentones, detailed ink work"),
        ("Cartoon", "cartoon style, bold outlines, vibrant colors, simplified shapes, 2D animation"),
        ("Watercolor", "watercolor painting, soft edges, vibrant washes, paper texture"),
        ("Oil Painting", "oil painting, thick brushstrokes, impasto, classic art"),
        ("Pencil Sketch", "pencil sketch, graphite, cross-hatching, hand-drawn, sketchbook"),
        ("Ink Drawing", "ink drawing, calligraphy, detailed line work, black and white"),
        ("Line Art", "line art, black and white, clean lines, minimalist drawing, vector"),
    )
    + _presets(
        "Historical & Niche Styles",
        ("Art Deco", "art deco, 1920s style, geometric patterns, gold and black, luxurious"),
        (
            "Art Nouveau",
            "art nouveau, style of Alphonse Mucha, intricate lines, decorative, flowing curves, organic forms",
        ),
        ("Ukiyo-e", "Ukiyo-e style, Japanese woodblock print, bold outlines, flat colors, style of Hokusai"),
        ("Impressionism", "impressionist painting, style of Monet, visible brushstrokes, soft light"),
        ("Surrealism", "surrealism, dreamlike, bizarre, strange, style of Salvador Dali"),
    )
    + _presets(
        "Graphic & Material Styles",
        ("Minimalist", "minimalist, clean lines, simple, modern, uncluttered"),
        ("Sticker", "die-cut sticker, vector illustration, vibrant colors, white border"),
        ("Pixel Art", "pixel art, 8-bit, 16-bit, retro video game, sprite"),
        ("Papercraft", "papercraft, origami, layered paper, paper quilling, cut paper art"),
        ("Claymation", "claymation style, plasticine, stop-motion, sculpted clay, Aardman studios style"),
    )
)


def get_style_preset(name: str) -> StylePreset:
    """
    Retrieve a preset by name (case-insensitive).

    Raises:
        KeyError: If no preset has that name
    """
    key = name.strip().lower()
    for preset in STYLE_PRESETS:
        if preset.name.lower() == key:
            return preset
    raise KeyError(f"Style preset '{name}' not found")


def apply_style(prompt: str, keywords: str) -> str:
    """
    Append style keywords to a prompt.

    A trimmed prompt ending in a comma gets a single space before the
    keywords, any other non-empty prompt gets ", ", and an empty prompt
    becomes the keywords alone.
    """
    trimmed = prompt.strip()
    if trimmed.endswith(","):
        return f"{trimmed} {keywords}"
    return f"{trimmed}, {keywords}" if trimmed else keywords
