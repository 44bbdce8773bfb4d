"""Localized user-facing messages for file store errors."""
from typing import Dict, Optional

DEFAULT_LOCALE = "en"

MESSAGES: Dict[str, Dict[str, str]] = {
    "en": {
        "valid.file.not_exist_extension": "Files without an extension cannot be uploaded.",
        "valid.file.not_allow_extension": "This file extension is not allowed.",
        "valid.file.invalid_path": "The file path is invalid.",
        "valid.file.invalid_name": "The file name is invalid.",
        "valid.file.not_found": "The file could not be found.",
        "valid.file.not_saved_try_again": "The file could not be saved. Please try again.",
        "valid.file.too_large": "The file exceeds the maximum upload size.",
    },
    "ko": {
        "valid.file.not_exist_extension": "확장자가 없는 파일은 업로드할 수 없습니다.",
        "valid.file.not_allow_extension": "허용되지 않는 파일 확장자입니다.",
        "valid.file.invalid_path": "파일 경로가 잘못되었습니다.",
        "valid.file.invalid_name": "파일명이 잘못되었습니다.",
        "valid.file.not_found": "파일을 찾을 수 없습니다.",
        "valid.file.not_saved_try_again": "파일을 저장할 수 없습니다. 다시 시도해 주세요.",
        "valid.file.too_large": "업로드 가능한 파일 크기를 초과했습니다.",
    },
}


def resolve_locale(accept_language: Optional[str], default: str = DEFAULT_LOCALE) -> str:
    """Pick the first supported language from an Accept-Language header.

    Quality values are honoured by ordering; tags are matched on their
    primary subtag, so ``ko-KR`` selects ``ko``.

    Examples:
        >>> resolve_locale("ko-KR,ko;q=0.9,en;q=0.8")
        'ko'
        >>> resolve_locale("fr-FR", default="en")
        'en'
    """
    if not accept_language:
        return default if default in MESSAGES else DEFAULT_LOCALE

    candidates = []
    for position, part in enumerate(accept_language.split(",")):
        tag, _, params = part.strip().partition(";")
        quality = 1.0
        params = params.strip()
        if params.startswith("q="):
            try:
                quality = float(params[2:])
            except ValueError:
                quality = 0.0
        if tag:
            candidates.append((-quality, position, tag.split("-")[0].lower()))

    for _, _, language in sorted(candidates):
        if language in MESSAGES:
            return language
    return default if default in MESSAGES else DEFAULT_LOCALE


def get_message(key: str, locale: str = DEFAULT_LOCALE) -> str:
    """Look up *key* in *locale*, falling back to English and then the key."""
    catalog = MESSAGES.get(locale) or MESSAGES[DEFAULT_LOCALE]
    if key in catalog:
        return catalog[key]
    return MESSAGES[DEFAULT_LOCALE].get(key, key)
