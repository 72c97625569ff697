"""Tests for the per-studio task builders."""

import random

import pytest
from pydantic import ValidationError

from creativestudio.builders import catalogs
from creativestudio.builders.ad_cloner import AdClonerOptions, build_ad_cloner_tasks
from creativestudio.builders.architecture import (
    ArchitectureOptions,
    Scope,
    build_architecture_tasks,
    build_prompt as build_architecture_prompt,
)
from creativestudio.builders.baby import BabyGender, BabyOptions, build_baby_tasks
from creativestudio.builders.common import (
    BatchContext,
    SourceImage,
    compose_prompt,
    resolve_id_pool,
    resolve_pool,
    split_custom,
)
from creativestudio.builders.hair import (
    ColorOption,
    Gender,
    HairOptions,
    PoseStyle,
    build_hair_tasks,
    color_pool,
    hairstyle_pool,
    pose_pool,
)
from creativestudio.builders.image_studio import (
    ImageStudioOptions,
    ProStudioOptions,
    build_image_studio_tasks,
    build_pro_studio_tasks,
    render_filename,
)
from creativestudio.builders.video import (
    VideoClip,
    VideoOptions,
    build_timeline_tasks,
    build_video_tasks,
    timeline_pairs,
)
from creativestudio.models.errors import InvalidInputError
from creativestudio.models.requests import VIDEO_MODEL, ImageBlob
from creativestudio.models.responses import AdVariation

TS = "240101120000"


@pytest.fixture
def context():
    return BatchContext(session_id="ABC1234", timestamp=TS)


@pytest.fixture
def rng():
    return random.Random(42)


def source(filename, url=None, blob=None):
    return SourceImage(filename=filename, url=url or f"https://cdn.example.com/{filename}", blob=blob)


class TestPools:
    """Tests for option pool resolution."""

    def test_empty_selection_is_full_catalog(self):
        pool = resolve_pool(catalogs.BABY_BACKGROUNDS)

        assert len(pool) == sum(len(category.options) for category in catalogs.BABY_BACKGROUNDS)

    def test_selection_by_category(self):
        pool = resolve_pool(catalogs.BABY_BACKGROUNDS, ["Outdoor"])

        assert [option.id for option in pool] == ["park_sunny", "beach_day"]

    def test_unknown_selection_falls_back(self):
        assert len(resolve_pool(catalogs.BABY_BACKGROUNDS, ["Mars"])) == 5

    def test_custom_override_wins(self):
        pool = resolve_pool(catalogs.BABY_BACKGROUNDS, ["Outdoor"], " snowy cabin, , lighthouse ", True, "bg")

        assert [option.prompt for option in pool] == ["snowy cabin", "lighthouse"]
        assert pool[0].id == "custom_bg_0"

    def test_blank_custom_override_ignored(self):
        assert len(resolve_pool(catalogs.BABY_BACKGROUNDS, (), "  ,  ", True)) == 5

    def test_id_pool(self):
        styles = catalogs.ARCHITECTURE_STYLES["garden"]

        assert [o.id for o in resolve_id_pool(styles, ["formal_french"])] == ["formal_french"]
        assert len(resolve_id_pool(styles, [])) == 2

    def test_helpers(self):
        assert split_custom("a, b ,,c") == ["a", "b", "c"]
        assert split_custom(None) == []
        assert compose_prompt(" Hello ", "", None, "world") == "Hello world"


class TestHairBuilder:
    """Tests for the hair studio builder."""

    def test_hairstyle_pool_defaults_to_gendered_catalog(self):
        female = hairstyle_pool(HairOptions(gender=Gender.FEMALE))
        male = hairstyle_pool(HairOptions(gender=Gender.MALE))

        assert len(female) == 4 + 4 + 3
        assert len(male) == 4 + 3 + 3
        assert all(not option.id.startswith("m_") for option in female)

    def test_hairstyle_pool_category_and_custom(self):
        assert len(hairstyle_pool(HairOptions(hairstyle_categories=["Short & Chic"]))) == 4
        custom = hairstyle_pool(HairOptions(use_custom_hairstyles=True, custom_hairstyles="Mullet, Afro"))
        assert [option.name for option in custom] == ["Mullet", "Afro"]

    def test_color_pool_keeps_original_by_default(self):
        assert color_pool(HairOptions()) == [None]
        pool = color_pool(HairOptions(color_options=[ColorOption.BOLD]))
        assert None not in pool
        assert pool == list(catalogs.BOLD_HAIR_COLORS)

    def test_pose_pool(self):
        assert pose_pool(HairOptions()) == [None]
        assert len(pose_pool(HairOptions(pose_options=[PoseStyle.RANDOM]))) == len(catalogs.POSE_PROMPTS)

    def test_tasks_and_filenames(self, context, rng):
        """Test that filenames, keys and labels follow the studio's scheme."""
        options = HairOptions(keep_original_hairstyle=True, image_count=3)

        tasks = build_hair_tasks(options, source("my photo.jpg"), context, source_index=1, rng=rng)

        assert len(tasks) == 3
        assert tasks[0].filename == f"ABC1234_my_photo_female_original_original_{TS}_00.jpg"
        assert tasks[2].filename.endswith(f"_{TS}_02.jpg")
        assert [(t.key.source_index, t.key.variant_index) for t in tasks] == [(1, 0), (1, 1), (1, 2)]
        assert tasks[0].labels == {"hairstyle": "Original Hairstyle", "color": "original"}
        assert tasks[0].image_urls == ("https://cdn.example.com/my photo.jpg",)
        assert tasks[0].model == "gemini-2.5-flash-image"

    def test_prompt_mentions_choices(self, context, rng):
        options = HairOptions(
            use_custom_hairstyles=True,
            custom_hairstyles="Mullet",
            use_custom_hair_colors=True,
            custom_hair_colors="teal",
            image_count=1,
        )

        task = build_hair_tasks(options, source("a.jpg"), context, rng=rng)[0]

        assert '"Mullet" hairstyle' in task.prompt
        assert 'hair color to "teal"' in task.prompt
        assert "preserve the exact same facial expression" in task.prompt
        assert task.filename == f"ABC1234_a_female_custom_style_0_teal_{TS}_00.jpg"


class TestBabyBuilder:
    """Tests for the baby studio builder."""

    def test_tasks(self, context, rng):
        options = BabyOptions(gender=BabyGender.GIRL, age="Toddler (1-3 yrs)", image_count=3)

        tasks = build_baby_tasks(options, source("mom.jpg"), source("dad.png"), context, rng=rng)

        assert len(tasks) == 3
        for i, task in enumerate(tasks):
            assert task.filename.startswith("ABC1234_baby_mom_dad_girl_toddler_")
            assert task.filename.endswith(f"_{TS}_{i:02d}.jpg")
            assert task.key.variant_index == i
            assert task.image_urls == ("https://cdn.example.com/mom.jpg", "https://cdn.example.com/dad.png")
            assert "baby girl" in task.prompt
            assert "suspenders" not in task.prompt
            assert task.labels["description"].startswith("Girl Toddler (1-3 yrs) - ")

    def test_surprise_me_has_no_gender_line(self, context, rng):
        options = BabyOptions(image_count=1, use_custom_composition=True, custom_composition="on a swing")

        task = build_baby_tasks(options, source("a.jpg"), source("b.jpg"), context, rng=rng)[0]

        assert "Child's Gender" not in task.prompt
        assert "The scene should be a on a swing." in task.prompt
        assert "_surpriseme_" in task.filename


class TestArchitectureBuilder:
    """Tests for the architecture studio builder."""

    def test_exhaustive_mode(self, context):
        """Test that every style gets exactly K images."""
        options = ArchitectureOptions(scope=Scope.FACADE, images_per_style=2)

        tasks = build_architecture_tasks(options, source("house.png"), context)

        styles = [task.labels["style"] for task in tasks]
        assert styles == [
            "Modern Glass Curtain Wall",
            "Modern Glass Curtain Wall",
            "Traditional Brick",
            "Traditional Brick",
            "Wood Siding",
            "Wood Siding",
        ]
        assert tasks[0].filename == f"ABC1234_house_facade_Modern_Glass_Curtain_Wall_Current_None_{TS}_00.jpg"
        assert [task.key.variant_index for task in tasks] == list(range(6))

    def test_random_mode_respects_selection(self, context, rng):
        options = ArchitectureOptions(scope=Scope.INTERIOR, styles=["japandi"], image_count=3, time="night")

        tasks = build_architecture_tasks(options, source("room.jpg"), context, rng=rng)

        assert len(tasks) == 3
        assert all(task.labels == {"style": "Japandi", "time": "Night", "theme": "None"} for task in tasks)
        assert "during night" in tasks[0].prompt

    def test_unknown_time_rejected(self):
        with pytest.raises(ValidationError):
            ArchitectureOptions(time="midnight-ish")

    def test_prompt_preserves_angle_by_default(self):
        style = catalogs.ARCHITECTURE_STYLES["interior"][0]

        assert "Preserve the exact camera angle" in build_architecture_prompt(style, "", "", "")
        assert "Preserve the exact camera angle" not in build_architecture_prompt(style, "", "", "from above")


class TestImageStudioBuilders:
    """Tests for the image and pro studio builders."""

    def test_grid_keys(self, context):
        """Test one task per (image, prompt) with matching keys."""
        options = ImageStudioOptions(prompts=["a", "b", "c"], prepend_prompt="Photo:", append_prompt="4k")

        tasks = build_image_studio_tasks(options, [source("x.jpg"), source("y.jpg")], context)

        assert len(tasks) == 6
        assert [(t.key.source_index, t.key.variant_index) for t in tasks] == [
            (0, 0), (0, 1), (0, 2), (1, 0), (1, 1), (1, 2)
        ]
        assert tasks[1].prompt == "Photo: b 4k"
        assert tasks[3].image_urls == ("https://cdn.example.com/y.jpg",)

    def test_blank_prompt_rejected(self, context):
        with pytest.raises(InvalidInputError):
            build_image_studio_tasks(ImageStudioOptions(prompts=["ok", "  "]), [source("x.jpg")], context)
        with pytest.raises(InvalidInputError):
            build_image_studio_tasks(ImageStudioOptions(prompts=["ok"]), [], context)

    def test_render_filename(self, context):
        template = "{set_id}_{original_filename}_{timestamp}_{version_index}"

        assert render_filename(template, source("cropped_cat.jpeg"), context, 0) == f"ABC1234_cat_{TS}_1.jpeg"
        assert render_filename(template, source("noext"), context, 1) == f"ABC1234_noext_{TS}_2.png"

    def test_render_filename_short_id(self, context):
        template = "{original_filename}_{short_id}_{version_index}"
        uploaded = SourceImage(filename="photo.jpg", url="https://cdn.example.com/p.jpg", short_id="k3x9")

        assert render_filename(template, uploaded, context, 0) == "photo_k3x9_1.jpg"
        assert render_filename(template, source("photo.jpg"), context, 0, image_index=1) == "photo_img2_1.jpg"

    def test_duplicate_source_names_stay_unique(self, context):
        """Test that two uploads sharing a filename get distinct output names."""
        sources = [
            SourceImage(filename="photo.jpg", url="https://cdn.example.com/1.jpg"),
            SourceImage(filename="photo.jpg", url="https://cdn.example.com/2.jpg"),
        ]

        tasks = build_image_studio_tasks(ImageStudioOptions(prompts=["p"]), sources, context)

        assert [t.filename for t in tasks] == [
            f"photo_img1_after_ABC1234_{TS}_1.jpg",
            f"photo_img2_after_ABC1234_{TS}_1.jpg",
        ]

    def test_template_without_short_id_deduplicated(self, context):
        sources = [source("photo.jpg"), source("photo.jpg")]
        options = ImageStudioOptions(prompts=["p"], filename_template="{set_id}_{original_filename}")

        tasks = build_image_studio_tasks(options, sources, context)

        assert [t.filename for t in tasks] == ["ABC1234_photo.jpg", "ABC1234_photo_2.jpg"]

    def test_pro_studio_slots(self, context):
        """Test that each prompt yields num_images single-image tasks with all inputs."""
        options = ProStudioOptions(prompts=["p1", "p2"], num_images=2)

        tasks = build_pro_studio_tasks(options, [source("a.jpg"), source("b.jpg")], context)

        assert len(tasks) == 4
        assert [(t.key.source_index, t.key.variant_index) for t in tasks] == [(0, 0), (0, 1), (1, 0), (1, 1)]
        assert all(t.num_images == 1 and len(t.image_urls) == 2 for t in tasks)
        assert tasks[0].filename == f"a_img1_after_ABC1234_{TS}_1_1.jpg"
        assert tasks[1].filename == f"a_img1_after_ABC1234_{TS}_1_2.jpg"
        assert tasks[0].model == "nano-banana-pro"
        assert tasks[0].resolution == "1K"


class TestVideoBuilders:
    """Tests for the video and timeline builders."""

    def test_video_tasks_skip_missing_prompts(self, context):
        clips = [
            VideoClip(image=source("one.jpg"), prompt="slow smile"),
            VideoClip(image=source("two.jpg"), prompt="  "),
            VideoClip(image=source("three.jpg"), prompt="wave"),
        ]

        tasks = build_video_tasks(clips, context, VideoOptions(duration="10"))

        assert [t.filename for t in tasks] == [f"ABC1234_one_{TS}_00.mp4", f"ABC1234_three_{TS}_02.mp4"]
        assert [t.key.source_index for t in tasks] == [0, 2]
        assert all(t.model == VIDEO_MODEL and t.duration == "10" for t in tasks)

    def test_timeline_pairs(self):
        pairs = timeline_pairs([source("a.jpg"), source("b.jpg"), source("c.jpg")], ["pan"])

        assert [(p.start.filename, p.end.filename, p.prompt) for p in pairs] == [
            ("a.jpg", "b.jpg", "pan"),
            ("b.jpg", "c.jpg", ""),
        ]
        assert timeline_pairs([source("a.jpg")]) == []

    def test_timeline_tasks(self, context):
        pairs = timeline_pairs([source("a.jpg"), source("b.jpg"), source("c.jpg")], ["pan", "zoom"])

        tasks = build_timeline_tasks(pairs, context)

        assert [t.filename for t in tasks] == [
            f"ABC1234_timeline_01_a_b_{TS}.mp4",
            f"ABC1234_timeline_02_b_c_{TS}.mp4",
        ]
        assert tasks[0].image_urls == ("https://cdn.example.com/a.jpg", "https://cdn.example.com/b.jpg")
        assert tasks[1].key.source_index == 1


class TestAdClonerBuilder:
    """Tests for the ad cloner builder."""

    @pytest.fixture
    def ad(self, image_blob):
        return SourceImage(filename="ad.jpg", blob=image_blob)

    @pytest.fixture
    def variations(self):
        return [
            AdVariation(title="Italian Woman – Rome||SUBJECT_ORIGIN=synthesized", prompt="Replace the woman."),
            AdVariation(title="Student||SUBJECT_ORIGIN=subject_image", prompt="Swap in the student."),
            AdVariation(title="Blank", prompt="   "),
        ]

    def test_one_task_per_variation(self, variations, ad, context, image_blob):
        """Test that each variation edits the ad image plus the subject images."""
        subject = SourceImage(filename="me.png", blob=ImageBlob(base64="c3ViamVjdA==", mime_type="image/png"))

        tasks = build_ad_cloner_tasks(variations, ad, [subject], context, AdClonerOptions(aspect_ratio="4:5"))

        assert len(tasks) == 2
        assert [t.key.variant_index for t in tasks] == [0, 1]
        assert tasks[0].model == "gemini-2.5-flash-image"
        assert tasks[0].aspect_ratio == "4:5"
        assert tasks[0].prompt == "Replace the woman."
        assert [blob.mime_type for blob in tasks[0].images] == ["image/jpeg", "image/png"]
        assert tasks[0].images[0] == image_blob
        assert tasks[0].labels == {"variation": "Italian Woman – Rome"}
        assert tasks[0].filename == f"ABC1234_Italian_Woman___Rome_var1_gen1_{TS}.jpg"

    def test_selected_indices_keep_positions(self, variations, ad, context):
        tasks = build_ad_cloner_tasks(variations, ad, [], context, indices=[1])

        assert len(tasks) == 1
        assert tasks[0].key.variant_index == 1
        assert tasks[0].aspect_ratio == "auto"
        assert "_var2_" in tasks[0].filename

    def test_ad_image_required(self, variations, context):
        with pytest.raises(InvalidInputError):
            build_ad_cloner_tasks(variations, SourceImage(filename="ad.jpg", url="https://cdn/ad.jpg"), [], context)

    def test_unknown_index(self, variations, ad, context):
        with pytest.raises(InvalidInputError):
            build_ad_cloner_tasks(variations, ad, [], context, indices=[7])
