import re

import inflect

p = inflect.engine()


def split_camel_case(word: str) -> str:
    """Split PascalCase or camelCase into space-separated words."""
    return re.sub(r'(?<!^)(?=[A-Z])', ' ', word)


def to_snake_case(phrase: str) -> str:
    return '_'.join(word.lower() for word in phrase.split())


def table_name_for(class_name: str) -> str:
    """Default table for a mapped type: ``Person`` -> ``people``, ``BlogPost`` -> ``blog_posts``."""
    return to_snake_case(p.plural(split_camel_case(class_name).lower()))
