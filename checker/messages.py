"""
Message catalog.

Turns check errors into sentences for the student report. Templates use
`{{ key }}` placeholders filled from the error values.
"""

import re

from .config import DEFAULT_LOCALE
from .models import CheckError

_PLACEHOLDER = re.compile(r"\{\{\s*(\w+)\s*\}\}")

MESSAGES: dict[str, dict[str, str]] = {
    "ru": {
        "structure.directory": "Отсутствует директория `{{ name }}` и необходимые файлы в ней.",
        "structure.file": "Отсутствует файл `{{ name }}`.",
        "w3c": "Файл: `{{ fileName }}`, строка: {{ line }}. {{ message }}.",
        "stylelint.CssSyntaxError": "Файл: `{{ fileName }}`, строка: {{ line }}. Синтаксическая ошибка: {{ text }}.",
        "stylelint.no-duplicate-selectors": "Файл: `{{ fileName }}`, строка: {{ line }}. Дублируется селектор.",
        "stylelint.block-no-empty": "Файл: `{{ fileName }}`, строка: {{ line }}. Пустое CSS-правило.",
        "stylelint.declaration-block-no-duplicate-properties": "Файл: `{{ fileName }}`, строка: {{ line }}. Дублирующее свойство внутри CSS-правила.",
        "stylelint.block-opening-brace-space-before": "Файл: `{{ fileName }}`, строка: {{ line }}. Отсутствует пробел между селектором и открывающей скобкой.",
        "stylelint.declaration-block-semicolon-newline-after": "Файл: `{{ fileName }}`, строка: {{ line }}. Правило не на новой строке.",
        "stylelint.block-opening-brace-newline-after": "Файл: `{{ fileName }}`, строка: {{ line }}. Правило не на новой строке после открывающей скобки.",
        "stylelint.block-closing-brace-newline-before": "Файл: `{{ fileName }}`, строка: {{ line }}. Закрывающая скобка не на новой строке.",
        "stylelint": "Файл: `{{ fileName }}`, строка: {{ line }}. {{ text }}",
        "alternativeFonts": "Присутствуют альтернативные шрифты. Список допустимых шрифтов: `{{ fonts }}`.",
        "layoutDifferent": "Визуальное отличие макета от эталона. Изображение можно скачать в артефактах. Первое изображение - эталон, второе - ваша вёрстка, третье - отличие.",
        "semanticTagsMissing": "Отсутствуют семантические теги: `{{ tagNames }}`.",
        "langAttrMissing": "Укажите язык для страницы. Добавьте для тега `html` атрибут `lang` со значением `{{ lang }}`",
        "orderStylesheetLinks": "Неправильный порядок подключения стилей: сначала шрифты, потом собственные стили.",
        "notResetMargins": "Сбросьте браузерные отступы у элементов: {{ tagNames }}.",
        "titleEmmet": "Содержание `title` должно отличаться от заготовки Emmet",
        "logoWrapper": "Логотип не обёрнут в ссылку в шапке",
        "prefixForEmailAndPhone": "Ссылки на номер телефона и почту не снабжены префиксами в значении атрибутов `href`",
    },
    "en": {
        "structure.directory": "Directory `{{ name }}` and the files it must contain are missing.",
        "structure.file": "File `{{ name }}` is missing.",
        "w3c": "File: `{{ fileName }}`, line: {{ line }}. {{ message }}.",
        "stylelint.CssSyntaxError": "File: `{{ fileName }}`, line: {{ line }}. Syntax error: {{ text }}.",
        "stylelint.no-duplicate-selectors": "File: `{{ fileName }}`, line: {{ line }}. Duplicate selector.",
        "stylelint.block-no-empty": "File: `{{ fileName }}`, line: {{ line }}. Empty CSS rule.",
        "stylelint.declaration-block-no-duplicate-properties": "File: `{{ fileName }}`, line: {{ line }}. Duplicate property inside a CSS rule.",
        "stylelint.block-opening-brace-space-before": "File: `{{ fileName }}`, line: {{ line }}. Missing space between the selector and the opening brace.",
        "stylelint.declaration-block-semicolon-newline-after": "File: `{{ fileName }}`, line: {{ line }}. Declaration is not on a new line.",
        "stylelint.block-opening-brace-newline-after": "File: `{{ fileName }}`, line: {{ line }}. Declaration is not on a new line after the opening brace.",
        "stylelint.block-closing-brace-newline-before": "File: `{{ fileName }}`, line: {{ line }}. Closing brace is not on a new line.",
        "stylelint": "File: `{{ fileName }}`, line: {{ line }}. {{ text }}",
        "alternativeFonts": "Fonts outside the allowed list are used. Allowed fonts: `{{ fonts }}`.",
        "layoutDifferent": "The page differs visibly from the reference layout. The comparison images are available in the artifacts.",
        "semanticTagsMissing": "Semantic tags are missing: `{{ tagNames }}`.",
        "langAttrMissing": "Set the page language: add the `lang` attribute with value `{{ lang }}` to the `html` tag.",
        "orderStylesheetLinks": "Stylesheets are linked in the wrong order: fonts first, then your own styles.",
        "notResetMargins": "Reset the browser default margins of: {{ tagNames }}.",
        "titleEmmet": "The `title` must differ from the Emmet boilerplate.",
        "logoWrapper": "The logo in the header is not wrapped in a link.",
        "prefixForEmailAndPhone": "Phone and email links lack the scheme prefix in their `href`.",
    },
}


def _format_value(value) -> str:
    """Missing values (absent or None) render as an empty string."""
    return "" if value is None else str(value)


def render(error: CheckError, locale: str = DEFAULT_LOCALE) -> str:
    """
    Render an error as a sentence.

    Unknown stylelint rules use the generic stylelint template; any other
    unknown id is rendered as the id itself.

    Args:
        error: Error to render.
        locale: Catalog to use ("ru" or "en").

    Returns:
        The rendered message.

    Raises:
        KeyError: If the locale is not in the catalog.
    """
    catalog = MESSAGES[locale]
    template = catalog.get(error.id)
    if template is None and error.id.startswith("stylelint."):
        template = catalog["stylelint"]
    if template is None:
        return error.id

    values = error.values.model_dump() if error.values is not None else {}
    return _PLACEHOLDER.sub(lambda m: _format_value(values.get(m.group(1))), template)
