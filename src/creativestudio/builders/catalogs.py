"""
Option catalogs offered by the studios.

Representative subsets of the full tables; the builders only rely on their
shape (categories of id/name/prompt options).
"""

from creativestudio.builders.common import Option, OptionCategory


def _category(name: str, *options: tuple[str, str, str]) -> OptionCategory:
    return OptionCategory(name=name, options=tuple(Option(id=i, name=n, prompt=p) for i, n, p in options))


def _styles(name: str, *styles: tuple[str, str]) -> OptionCategory:
    return OptionCategory(name=name, options=tuple(Option(id=i, name=n, prompt=n) for i, n in styles))


# Hair studio

FEMALE_HAIRSTYLES = (
    _styles(
        "Short & Chic",
        ("f_pixie_blonde", "Platinum Blonde Pixie with Undercut"),
        ("f_bob_black", "Jet Black Micro-Bang Bob"),
        ("f_lob_silver", "Silver Ombre Lob"),
        ("f_french_bob", "Classic French Bob"),
    ),
    _styles(
        "Long & Luxurious",
        ("f_wavy_halfup", "Wavy Half-Updo"),
        ("f_curtain_bangs", "Long Hair with Curtain Bangs"),
        ("f_fishtail_braid", "Elegant Fishtail Braid"),
        ("f_sleek_ponytail", "High Sleek Ponytail"),
    ),
)

MALE_HAIRSTYLES = (
    _styles(
        "Modern Fades",
        ("m_high_fade_quiff", "High-Fade with Textured Quiff"),
        ("m_slick_undercut", "Slicked-Back Undercut"),
        ("m_pompadour", "Modern Pompadour"),
        ("m_skin_fade", "Skin Fade with Hard Part"),
    ),
    _styles(
        "Business Casual",
        ("m_side_part", "Classic Side Part"),
        ("m_ivy_league", "Ivy League Cut"),
        ("m_textured_crop", "Textured French Crop"),
    ),
)

AVANT_GARDE_HAIRSTYLES = _styles(
    "Avant-Garde & Edgy",
    ("ag_cyberpunk", "Cyberpunk Braids with Neon Highlights"),
    ("ag_sculptural", "Geometric Sculptural Hair"),
    ("ag_metallic_spikes", "Metallic Chrome Spiked Hair"),
)

ORIGINAL_HAIRSTYLE = Option(id="original", name="Original Hairstyle")

HAIR_COLORS = (
    "natural jet black",
    "natural dark brown",
    "natural medium ash brown",
    "natural golden blonde",
    "natural copper red",
)
BOLD_HAIR_COLORS = ("electric blue", "royal blue", "turquoise", "vibrant purple", "hot pink")
COMPLEX_NATURAL_HAIR_COLORS = (
    "ombre: dark brown roots → medium golden brown mids → light golden blonde ends",
    "sombre: medium neutral brown roots → light neutral brown ends",
    "balayage: dark brown base with soft caramel hand-painted pieces",
)
MULTICOLOR_BOLD_HAIR_COLORS = (
    "split-dye (left/right): jet black + platinum blonde",
    "split-dye (top/bottom): natural brown + teal underlayer",
    "rainbow peekaboo underlayer on dark brown",
)

POSE_PROMPTS = (
    "Render a new portrait expression of them mid-laugh, head slightly back, eyes crinkled, three-quarter view right.",
    "Render a new portrait expression of them with a confident smirk, chin tucked, eyes up to the lens, head tilted right.",
    "Render a new portrait expression of them thoughtful, three-quarter profile left, hand at chin, eyes off-camera.",
    "Render a new portrait expression of them serene with closed eyes, head gently bowed.",
)

MALE_BEARDS = (
    Option(id="b_none", name="Clean Shaven"),
    Option(id="b_stubble_light", name="Light Stubble"),
    Option(id="b_full_beard_short", name="Short Full Beard"),
    Option(id="b_goatee", name="Classic Goatee"),
    Option(id="b_moustache_handlebar", name="Handlebar Moustache"),
)
FEMALE_ACCESSORIES = (
    Option(id="a_none", name="None"),
    Option(id="a_earrings_hoop_gold", name="Large Gold Hoop Earrings"),
    Option(id="a_necklace_pearl_strand", name="Classic Pearl Strand Necklace"),
    Option(id="a_glasses_cateye", name="Tortoiseshell Cat-Eye Glasses"),
    Option(id="a_hat_beret", name="Chic Parisian Beret"),
)

# Baby studio

BABY_AGES = (
    Option(id="newborn", name="Newborn (0-6 mo)", prompt="a newborn baby, approximately 0-6 months old"),
    Option(id="infant", name="Infant (6-12 mo)", prompt="an infant, approximately 6-12 months old"),
    Option(id="toddler", name="Toddler (1-3 yrs)", prompt="a toddler, approximately 1-3 years old"),
    Option(id="child", name="Child (4-6 yrs)", prompt="a young child, approximately 4-6 years old"),
)

BABY_COMPOSITIONS = (
    _category("Solo Portrait", ("solo", "Solo Portrait", "a solo close-up portrait of the child")),
    _category(
        "Classic Portraits",
        ("solo_full", "Solo Full Body", "a full body portrait of the child"),
        ("tummy_time", "Tummy Time", "on a soft blanket during tummy time, chin propped, eyes toward camera"),
    ),
    _category(
        "Family & Pets",
        ("held", "Held by Parent", "the child being held lovingly by one of the parents (whose face is out of frame)"),
        ("pet_puppy", "With a Puppy", "the child playing gently with a friendly golden retriever puppy"),
    ),
)

BABY_BACKGROUNDS = (
    _category("Beige Studio", ("studio_beige", "Beige Studio", "against a warm, plain beige studio backdrop")),
    _category(
        "Indoor",
        ("nursery_sunlit", "Sunlit Nursery", "in a beautifully decorated, sunlit nursery in the morning"),
        ("living_room", "Living Room", "on a soft rug in a modern, clean living room"),
    ),
    _category(
        "Outdoor",
        ("park_sunny", "Sunny Park", "outdoors in a lush green park on a sunny day"),
        ("beach_day", "Beach Day", "at the beach, with soft sand and gentle waves in the background"),
    ),
)

BABY_CLOTHING_STYLES_UNISEX = (
    _category("White Onesie", ("onesie_white", "White Onesie", "wearing a simple, clean white onesie")),
    _category(
        "Cozy & Casual",
        ("pajamas_soft", "Soft Pajamas", "wearing cozy, soft pajamas"),
        ("overalls", "Overalls", "wearing classic denim overalls over a simple tee"),
    ),
)
BABY_CLOTHING_STYLES_BOY = (
    _category(
        "Dressed Up (Boy)",
        ("suspenders", "Suspenders & Bowtie", "wearing a tiny shirt with suspenders and a bow tie"),
        ("polo_shirt", "Polo Shirt & Shorts", "wearing a classic polo shirt with khaki shorts"),
    ),
)
BABY_CLOTHING_STYLES_GIRL = (
    _category(
        "Dressed Up (Girl)",
        ("dress_frilly", "Frilly Dress", "wearing a beautiful, frilly party dress"),
        ("floral_dress", "Floral Sundress", "wearing a light and airy floral sundress"),
    ),
)

BABY_ACTIONS = (
    _category(
        "Smiling at Camera",
        ("smiling_camera", "Smiling at Camera", "looking directly at the camera with a gentle, happy smile"),
    ),
    _category(
        "Happy & Calm",
        ("giggling", "Giggling", "giggling with a joyful, open-mouthed smile"),
        ("sleeping", "Sleeping Peacefully", "sleeping peacefully"),
    ),
    _category(
        "Playful & Curious",
        ("playing_blocks", "Playing with Blocks", "happily playing with colorful wooden blocks"),
        ("peekaboo", "Playing Peekaboo", "playing peekaboo from behind a small blanket"),
    ),
)

# Architecture studio

ARCHITECTURE_STYLES = {
    "interior": (
        Option(id="modern", name="Modern", prompt="modern design with clean lines, minimal ornamentation, neutral color palette, sleek furniture, and contemporary fixtures"),
        Option(id="scandinavian", name="Scandinavian", prompt="Scandinavian design with light wood tones, white walls, cozy textiles, functional furniture, and natural light emphasis"),
        Option(id="japandi", name="Japandi", prompt="Japandi design blending Japanese and Scandinavian aesthetics, natural materials, neutral tones, and minimalist zen principles"),
        Option(id="art_deco", name="Art Deco", prompt="Art Deco design with geometric patterns, luxurious materials, bold colors, metallic accents, and glamorous 1920s-30s style"),
    ),
    "exterior": (
        Option(id="modern", name="Modern", prompt="modern architecture with clean geometric forms, flat or low-pitched roofs, large windows, minimal ornamentation, and contemporary materials"),
        Option(id="bauhaus", name="Bauhaus", prompt="Bauhaus architecture with functional design, geometric shapes, flat roofs, steel and glass materials, and form-follows-function principles"),
        Option(id="colonial", name="Colonial", prompt="Colonial architecture with symmetrical facade, columns, shutters, brick or wood siding, and traditional American proportions"),
    ),
    "facade": (
        Option(id="modern_glass", name="Modern Glass Curtain Wall", prompt="modern glass curtain wall facade with floor-to-ceiling glazing, minimal frames, reflective surfaces, and sleek contemporary appearance"),
        Option(id="brick_traditional", name="Traditional Brick", prompt="traditional brick facade with classic masonry patterns, mortar joints, and timeless texture"),
        Option(id="wood_siding", name="Wood Siding", prompt="wood siding facade with horizontal or vertical boards, natural grain, and warm wood tones"),
    ),
    "garden": (
        Option(id="formal_french", name="Formal French Garden", prompt="formal French garden with geometric patterns, manicured hedges, symmetrical layout, gravel paths, and classical statuary"),
        Option(id="italian_renaissance", name="Italian Renaissance", prompt="Italian Renaissance garden with terraced levels, fountains, cypress trees, stone balustrades, and classical proportions"),
    ),
    "landscape": (
        Option(id="naturalistic", name="Naturalistic Landscape", prompt="naturalistic landscape design with flowing forms, native plantings, natural materials, and organic integration with surroundings"),
        Option(id="meadow", name="Meadow Landscape", prompt="meadow landscape with native grasses, wildflowers, gently rolling terrain, and prairie-like environment"),
        Option(id="urban", name="Urban Landscape", prompt="urban landscape with street trees, planters, hardscape, and city environment integration"),
    ),
}

ARCHITECTURE_TIMES = (
    Option(id="current", name="Keep Current Lighting", prompt=""),
    Option(id="golden_hour", name="Golden Hour", prompt="during golden hour with warm amber sunlight, long dramatic shadows, glowing atmosphere, and rich colors"),
    Option(id="night", name="Night", prompt="during night with dark sky, artificial lighting, illuminated windows, dramatic shadows, and nocturnal atmosphere"),
)

ARCHITECTURE_THEMES = (
    Option(id="none", name="No Theme", prompt=""),
    Option(id="winter", name="Winter", prompt="with winter seasonal theme featuring snow-covered surfaces, frost, evergreen decorations, and cold weather ambiance"),
    Option(id="christmas", name="Christmas", prompt="with Christmas theme featuring evergreen wreaths, red and green colors, twinkling lights, garlands, festive decorations, and holiday spirit"),
)

CAMERA_ANGLE_OPTIONS = (
    Option(id="preserve", name="Preserve Original Angle", prompt=""),
    Option(id="slight_variation", name="Slight Variation", prompt="with subtle camera angle variation, maintaining overall composition but with minor perspective shift"),
    Option(id="randomize", name="Randomize Angle", prompt="from a different camera angle and perspective, providing fresh viewpoint while maintaining the essence of the space"),
)
