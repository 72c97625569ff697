"""Text generation service (Gemini) for prompt authoring helpers.

Prompt wording is treated as opaque template text; the service owns the
transport, retry and parsing.
"""

import base64
import json
import logging
from typing import Any, Sequence

from google import genai
from google.genai import types
from pydantic import ValidationError

from creativestudio.config import NATIVE_TEXT_MODEL
from creativestudio.models.errors import MalformedResponseError
from creativestudio.models.requests import ImageBlob
from creativestudio.models.responses import AdConcepts, AdVariation
from creativestudio.providers.native_provider import build_client, call_native, response_to_dict
from creativestudio.services.response_adapter import parse_native_json_response, parse_native_text_response
from creativestudio.services.retry_service import build_retry_config, retry_with_backoff

logger = logging.getLogger(__name__)

TRANSLATE_SYSTEM_PROMPT = (
    "You are an AI prompt assistant. Your task is to translate and refine the given text into a clear, "
    "effective prompt for an AI image generator. Return ONLY the final, refined prompt string, with no "
    "additional commentary, explanations, or introductory phrases."
)
TRANSLATE_VIDEO_SYSTEM_PROMPT = (
    "You are an AI prompt assistant. Your task is to translate the given text into English and refine it "
    "into a clear and effective prompt for an AI video generator that animates a static image. The prompt "
    "should describe a short, subtle animation. Return ONLY the final, refined prompt string, with no "
    "additional commentary, explanations, or introductory phrases."
)
ENHANCE_TEMPLATE = (
    'Enhance the following image prompt to be more vivid, descriptive, and effective for an AI image '
    'generator: "{prompt}"'
)
PROMPT_LIST_TEMPLATE = (
    'Based on the instruction "{instruction}", generate a JSON array of strings, where each string is a '
    "unique, creative prompt for an AI image generator. The array should be valid JSON and contain a "
    "reasonable number of prompts (e.g., 5-10) unless specified otherwise."
)
VARIATION_TEMPLATE = 'Generate a single, creative variation of the following image prompt: "{prompt}"'
VIDEO_PROMPT_TEMPLATE = (
    "Analyze the {subject}, their clothing, and the setting in this image. Create a short, descriptive "
    "video prompt (around 25-35 words) for an AI video generator. The camera should be 'stationary' or "
    "'static'. Focus on subtle, natural movements.{guidance}"
)
ENHANCE_VIDEO_TEMPLATE = (
    "Analyze the image and the user's video prompt. Rewrite the prompt to be more descriptive, cinematic, "
    'and clear for an AI video generator, while keeping the core idea. The length should be around 25-35 '
    'words. User\'s prompt: "{prompt}"'
)
REWRITE_VIDEO_TEMPLATE = (
    "Analyze the image and the existing video prompt. Rewrite the video prompt to incorporate the following "
    "high-level instruction, while keeping the core subject and action from the original prompt.\n\n"
    'High-level instruction: "{guidance}"\nExisting prompt to rewrite: "{prompt}"\n\n'
    "Generate ONLY the new, rewritten video prompt."
)

AD_RESEARCH_PROMPT = (
    "Analyze this ad image to understand its context. What is the product, service, or topic being "
    "advertised? What is the overall theme and target audience? Provide a concise summary based on your "
    "analysis and web search."
)
AD_ENHANCE_TEMPLATE = (
    "You are an expert AI Ad concept writer. Enhance the following user instruction to be more creative, "
    "specific, and effective for generating a diverse set of ad variations. Focus on target audience, mood, "
    "and actionable changes. Return ONLY the enhanced instruction. The instruction to enhance is: "
    '"{instruction}"'
)
AD_CONCEPTS_SYSTEM_PROMPT = """You are an expert AI Ad Generator, creating detailed text prompts for AI ad image generation.
The first image is the sample ad. Any further images are subject images, used for the variations only.
Return a single JSON object with a `base_prompt` and a `variations` array.
- `base_prompt` ({"title", "details"}) describes ONLY the sample ad: format, composition, subjects, poses, setting, visible text and mood. Its title ends with ||MODE=BASE.
- Each variation ({"title", "details", "prompt"}) keeps the ad's style and layout but changes the subject. Its title ends with ||SUBJECT_ORIGIN=subject_image when a subject image was given, otherwise ||SUBJECT_ORIGIN=synthesized.
- Each variation's `prompt` is an instructional edit prompt: direct commands saying exactly what to change in the original ad image and what to keep.
- Generate exactly the number of variations requested. Preserve the ad's original language unless told otherwise."""
AD_VARIATIONS_SYSTEM_PROMPT = (
    "You are an expert ad prompt generator. Your task is to generate new variation prompts based on existing "
    "data and user instructions. The output must be a single, valid JSON object with a 'variations' key "
    "containing an array of new variation objects, each with 'title', 'details' and 'prompt'. Do not repeat "
    "ideas from the existing data."
)


class TextGenerationService:
    """Prompt helpers backed by the native text model."""

    def __init__(
        self,
        client: genai.Client | None = None,
        api_key: str | None = None,
        model: str = NATIVE_TEXT_MODEL,
        max_retries: int = 3,
        retry_delay: float = 1.0,
        timeout_seconds: float | None = 60.0,
    ):
        """
        Initialize text generation service.

        Args:
            client: Existing SDK client (built from api_key / env when omitted)
            api_key: Gemini API key (defaults to GEMINI_API_KEY env var)
            model: Text model name
            max_retries: Total attempts for network failures
            retry_delay: Base backoff delay in seconds
            timeout_seconds: Per-attempt timeout
        """
        self.client = client or build_client(api_key)
        self.model = model
        self.retry_config = build_retry_config(max_retries, retry_delay)
        self.timeout_seconds = timeout_seconds

    async def _generate(
        self,
        prompt: str,
        images: Sequence[ImageBlob] = (),
        system_instruction: str | None = None,
        json_output: bool = False,
        tools: list[types.Tool] | None = None,
        model: str | None = None,
    ) -> dict[str, Any]:
        parts: list[Any] = [
            types.Part.from_bytes(data=base64.b64decode(image.base64), mime_type=image.mime_type) for image in images
        ]
        parts.append(types.Part.from_text(text=prompt))

        config = None
        if system_instruction or json_output or tools:
            config = types.GenerateContentConfig(
                system_instruction=system_instruction,
                response_mime_type="application/json" if json_output else None,
                tools=tools,
            )
        response = await retry_with_backoff(
            call_native,
            self.client.aio.models.generate_content,
            model=model or self.model,
            contents=[types.Content(role="user", parts=parts)],
            config=config,
            retry_config=self.retry_config,
            timeout_seconds=self.timeout_seconds,
        )
        return response_to_dict(response)

    async def generate_text(self, prompt: str, image: ImageBlob | None = None, system_instruction: str | None = None) -> str:
        images = (image,) if image is not None else ()
        return parse_native_text_response(await self._generate(prompt, images, system_instruction)).strip()

    async def generate_json(
        self,
        prompt: str,
        expected_keys: list[str] | None = None,
        images: Sequence[ImageBlob] = (),
        system_instruction: str | None = None,
        json_output: bool = False,
        model: str | None = None,
    ) -> Any:
        response = await self._generate(prompt, images, system_instruction, json_output=json_output, model=model)
        return parse_native_json_response(response, expected_keys)

    async def enhance_prompt(self, prompt: str) -> str:
        return await self.generate_text(ENHANCE_TEMPLATE.format(prompt=prompt))

    async def translate_to_english(self, text: str, for_video: bool = False) -> str:
        system = TRANSLATE_VIDEO_SYSTEM_PROMPT if for_video else TRANSLATE_SYSTEM_PROMPT
        return await self.generate_text(f'The text to process is: "{text}"', system_instruction=system)

    async def generate_prompt_list(self, instruction: str) -> list[str]:
        """Generate a list of image prompts from a high-level instruction."""
        prompts = await self.generate_json(PROMPT_LIST_TEMPLATE.format(instruction=instruction))
        if not isinstance(prompts, list):
            prompts = [prompts]
        result = [str(prompt).strip() for prompt in prompts if str(prompt).strip()]
        logger.info(f"📝 [TextService] Generated {len(result)} prompts")
        return result

    async def generate_prompt_variation(self, prompt: str) -> str:
        return await self.generate_text(VARIATION_TEMPLATE.format(prompt=prompt))

    async def generate_video_prompt(self, image: ImageBlob, guidance: str | None = None, subject: str = "person") -> str:
        """Draft a video prompt describing subtle motion for the given still."""
        extra = f' IMPORTANT: The prompt must also adhere to this high-level instruction: "{guidance}".' if guidance and guidance.strip() else ""
        return await self.generate_text(VIDEO_PROMPT_TEMPLATE.format(subject=subject, guidance=extra), image=image)

    async def enhance_video_prompt(self, image: ImageBlob, current_prompt: str) -> str:
        return await self.generate_text(ENHANCE_VIDEO_TEMPLATE.format(prompt=current_prompt), image=image)

    async def rewrite_video_prompt(self, image: ImageBlob, current_prompt: str, guidance: str) -> str:
        return await self.generate_text(
            REWRITE_VIDEO_TEMPLATE.format(prompt=current_prompt, guidance=guidance), image=image
        )

    async def research_ad_context(self, ad_image: ImageBlob) -> str:
        """Summarise what a sample ad promotes, grounded with web search."""
        response = await self._generate(
            AD_RESEARCH_PROMPT,
            (ad_image,),
            tools=[types.Tool(google_search=types.GoogleSearch())],
        )
        return parse_native_text_response(response).strip()

    async def enhance_ad_instructions(self, instruction: str) -> str:
        return await self.generate_text(AD_ENHANCE_TEMPLATE.format(instruction=instruction))

    async def generate_ad_concepts(
        self,
        ad_image: ImageBlob,
        subject_images: Sequence[ImageBlob] = (),
        num_variations: int = 3,
        research_context: str = "",
        instructions: str = "",
        model: str | None = None,
    ) -> AdConcepts:
        """
        Describe a sample ad and draft ``num_variations`` edit variations of it.

        Args:
            ad_image: The sample ad
            subject_images: Subjects the variations should feature
            num_variations: Variations to request
            research_context: Output of research_ad_context, if any
            instructions: Free-form user direction
            model: Text model override

        Returns:
            AdConcepts with the base description and the variations
        """
        subjects = " and subject images" if subject_images else ""
        prompt = f"Generate a base prompt and {num_variations} variations for the provided ad image{subjects}."
        if research_context:
            prompt += f'\n\nUse the following research context to inform the generation: "{research_context}"'
        if instructions:
            prompt += f'\n\nFollow these instructions: "{instructions}"'

        parsed = await self.generate_json(
            prompt,
            expected_keys=["base_prompt", "variations"],
            images=(ad_image, *subject_images),
            system_instruction=AD_CONCEPTS_SYSTEM_PROMPT,
            json_output=True,
            model=model,
        )
        try:
            concepts = AdConcepts.model_validate(parsed)
        except ValidationError as e:
            raise MalformedResponseError(f"The AI returned an invalid format for the ad concepts: {e}", raw=parsed) from e
        logger.info(f"📝 [TextService] Generated {len(concepts.variations)} ad variations")
        return concepts

    async def generate_ad_variations(
        self,
        existing: AdConcepts,
        num_variations: int = 1,
        research_context: str = "",
        instructions: str = "",
        model: str | None = None,
    ) -> list[AdVariation]:
        """Draft further variations that avoid repeating the existing ones."""
        prompt = (
            f"Based on the provided base prompt and existing variations, generate {num_variations} new, "
            "creative, and distinct variation(s)."
        )
        if instructions:
            prompt += f'\n\nRemember to also adhere to the original top-level instructions: "{instructions}"'
        if research_context:
            prompt += f'\n\nAlso consider the original research context: "{research_context}"'
        prompt += (
            "\n\nExisting Data (for context and to avoid generating duplicates):\n"
            f"{json.dumps(existing.model_dump(), indent=2)}"
        )

        parsed = await self.generate_json(
            prompt,
            expected_keys=["variations"],
            system_instruction=AD_VARIATIONS_SYSTEM_PROMPT,
            json_output=True,
            model=model,
        )
        try:
            return [AdVariation.model_validate(item) for item in parsed["variations"]]
        except (TypeError, ValidationError) as e:
            raise MalformedResponseError(f"Failed to parse the new variation from the AI: {e}", raw=parsed) from e
