from __future__ import annotations

import json
import logging
import math
from typing import Any
from urllib.parse import quote

from groq import Groq

from ..errors import DetailFetchFailure, LookupFailure, PitchGenerationFailure
from ..search.models import Business, BusinessDetails, LocationCoords
from .config import DEFAULT_LLM_CONFIG, LLMConfig

logger = logging.getLogger(__name__)

MAPS_SEARCH_URL = "https://www.google.com/maps/search/"

# Characters encodeURIComponent leaves alone besides alphanumerics and "-_.~".
_URI_SAFE = "!*'()"

LOOKUP_SYSTEM_PROMPT = (
    "You are a local business search engine backed by Google Maps data. "
    "Given a business category and a place, list real businesses of that "
    "category that are open to the public.\n\n"
    "Return ONLY valid JSON in this exact format:\n"
    '{"businesses": [{"title": "<business name>", "place_id": "<Google Maps Place ID>", '
    '"latitude": <number>, "longitude": <number>}]}\n'
    "Use decimal degrees for coordinates. "
    "Return an empty list when you know of no matching business."
)

DETAILS_SYSTEM_PROMPT = (
    "You are a business directory assistant. "
    "Return ONLY valid JSON in this exact format:\n"
    '{"address": "<full formatted street address>", '
    '"phone": "<international phone number>", '
    '"hours": ["<opening hours for one day of the week>"], '
    '"website": "<official website URL>"}\n'
    "Omit website when the business has none."
)

PITCH_SYSTEM_PROMPT = (
    "You are a helpful assistant that writes professional business communication."
)


def build_maps_uri(title: str, place_id: str) -> str:
    """Google Maps search link that opens *place_id*, labelled with *title*."""
    return (
        f"{MAPS_SEARCH_URL}?api=1&query={quote(title, safe=_URI_SAFE)}"
        f"&query_place_id={quote(place_id, safe='')}"
    )


def _build_lookup_message(
    category: str,
    location: LocationCoords | None,
    manual_location: str | None,
    max_results: int,
) -> str:
    if location is not None:
        where = f"near latitude {location.latitude} and longitude {location.longitude}"
    elif manual_location and manual_location.strip():
        where = f"in {manual_location.strip()}"
    else:
        raise ValueError("A location (either automatic or manual) must be provided.")
    return f"Find good {category} businesses {where}. List at most {max_results} businesses."


def _build_pitch_message(business_name: str, business_category: str) -> str:
    return (
        "Generate a short, professional outreach email template to a business.\n"
        f'Business Name: "{business_name}"\n'
        f'Business Category: "{business_category}"\n\n'
        "The email should be from a potential customer inquiring about their services. "
        "Make it friendly, concise, and easy to customize. Provide only the email body "
        'text, without any introduction or sign-off formalities like "Subject:" or "Sincerely,".'
    )


def _complete(
    messages: list[dict[str, str]],
    config: LLMConfig,
    *,
    temperature: float,
    json_mode: bool,
) -> str:
    """Run one chat completion and return its non-empty text content."""
    if not config.enabled:
        raise RuntimeError("LLM integration is disabled")
    if not config.api_key:
        raise RuntimeError("GROQ_API_KEY environment variable not set")

    extra: dict[str, Any] = {}
    if json_mode:
        extra["response_format"] = {"type": "json_object"}

    client = Groq(api_key=config.api_key, timeout=config.timeout)
    response = client.chat.completions.create(
        model=config.model,
        messages=messages,
        max_tokens=config.max_tokens,
        temperature=temperature,
        **extra,
    )

    content = response.choices[0].message.content or ""
    if not content.strip():
        raise ValueError("Received an empty response from the API.")
    return content


def _coerce_coordinate(value: Any, limit: float) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number) or abs(number) > limit:
        return None
    return number


def _parse_business(item: Any) -> Business | None:
    if not isinstance(item, dict):
        return None
    title = str(item.get("title") or "").strip()
    place_id = str(item.get("place_id") or item.get("placeId") or "").strip()
    if not title or not place_id:
        return None

    latitude = _coerce_coordinate(item.get("latitude"), 90.0)
    longitude = _coerce_coordinate(item.get("longitude"), 180.0)
    if latitude is None or longitude is None:
        latitude = longitude = None

    return Business(
        title=title,
        uri=build_maps_uri(title, place_id),
        place_id=place_id,
        latitude=latitude,
        longitude=longitude,
    )


def parse_businesses(content: str) -> list[Business]:
    """
    Parse a lookup response into businesses.

    Entries without a title or place id are dropped. Coordinates that are
    missing, non-numeric or out of range leave the business without a
    position. Duplicates are kept; merging is the caller's job.
    """
    parsed = json.loads(content)
    if not isinstance(parsed, dict):
        raise ValueError("Unexpected response format from the API.")
    items = parsed.get("businesses") or []
    if not isinstance(items, list):
        raise ValueError("Unexpected response format from the API.")

    businesses: list[Business] = []
    for item in items:
        business = _parse_business(item)
        if business is not None:
            businesses.append(business)
    return businesses


def find_nearby_businesses(
    category: str,
    location: LocationCoords | None,
    manual_location: str | None = None,
    config: LLMConfig = DEFAULT_LLM_CONFIG,
) -> list[Business]:
    """
    Ask the LLM for businesses of *category* near *location*, or in
    *manual_location* when no coordinates are known.

    Raises :class:`LookupFailure` carrying the cause on any failure.
    """
    try:
        user_message = _build_lookup_message(
            category, location, manual_location, config.max_results,
        )
        content = _complete(
            [
                {"role": "system", "content": LOOKUP_SYSTEM_PROMPT},
                {"role": "user", "content": user_message},
            ],
            config,
            temperature=0.2,
            json_mode=True,
        )
        businesses = parse_businesses(content)
    except Exception as exc:
        logger.error("Error fetching businesses from Groq", exc_info=True)
        raise LookupFailure(f"Failed to find businesses: {exc}") from exc

    logger.debug("Lookup for %r returned %d businesses", category, len(businesses))
    return businesses


def get_business_details(
    place_id: str,
    config: LLMConfig = DEFAULT_LLM_CONFIG,
) -> BusinessDetails:
    try:
        content = _complete(
            [
                {"role": "system", "content": DETAILS_SYSTEM_PROMPT},
                {
                    "role": "user",
                    "content": (
                        f"Provide details for the business with Google Maps Place ID: {place_id}. "
                        "Ensure the address is complete and the phone number includes the country code."
                    ),
                },
            ],
            config,
            temperature=0.1,
            json_mode=True,
        )
        parsed = json.loads(content)
        if isinstance(parsed.get("hours"), str):
            parsed["hours"] = [parsed["hours"]]
        return BusinessDetails.model_validate(parsed)
    except Exception as exc:
        logger.error("Error fetching business details from Groq", exc_info=True)
        raise DetailFetchFailure(f"Failed to get business details: {exc}") from exc


def generate_contact_pitch(
    business_name: str,
    business_category: str,
    config: LLMConfig = DEFAULT_LLM_CONFIG,
) -> str:
    """Draft an outreach email body addressed to *business_name*."""
    try:
        content = _complete(
            [
                {"role": "system", "content": PITCH_SYSTEM_PROMPT},
                {"role": "user", "content": _build_pitch_message(business_name, business_category)},
            ],
            config,
            temperature=0.7,
            json_mode=False,
        )
    except Exception as exc:
        logger.error("Error generating contact pitch", exc_info=True)
        raise PitchGenerationFailure(f"Failed to generate pitch: {exc}") from exc
    return content.strip()
