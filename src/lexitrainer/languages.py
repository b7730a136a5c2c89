"""Per-language lookup tables.

All tables are keyed by short language code ("fr", "es", "de", "la", "en") and
are read-only after import. Language tags may be given as codes or as names
("french", "German"); unknown tags resolve to None.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping, Optional, Tuple

_LANGUAGE_ALIASES = {
    "fr": "fr",
    "french": "fr",
    "es": "es",
    "spanish": "es",
    "de": "de",
    "german": "de",
    "la": "la",
    "latin": "la",
    "en": "en",
    "english": "en",
}


def resolve_language(tag: Optional[str]) -> Optional[str]:
    """Map a language code or name to its short code, or None if unknown."""
    if not tag:
        return None
    return _LANGUAGE_ALIASES.get(str(tag).strip().lower())


# Recognizer spelling -> canonical spelling, applied in order.
PHONETIC_SUBSTITUTIONS: Mapping[str, Tuple[Tuple[str, str], ...]] = MappingProxyType({
    "fr": (
        ("sh", "ch"),    # shien -> chien
        ("zh", "j"),     # zhour -> jour
        ("uh", "eu"),    # bluh -> bleu
        ("oh", "eau"),   # boh -> beau
        ("ay", "é"),     # parlay -> parlé
        ("eh", "è"),
        ("ahn", "an"),
        ("ohn", "on"),
        ("uhn", "un"),
        ("een", "in"),
        ("wa", "oi"),    # mwa -> moi
        ("wee", "oui"),
        ("ew", "u"),
        ("air", "ère"),
        ("or", "eur"),
    ),
    "es": (
        ("ny", "ñ"),
        ("ll", "y"),
        ("b", "v"),
        ("rr", "r"),
        ("th", "z"),
        ("th", "c"),
        ("h", ""),       # silent h
    ),
    "de": (
        ("sh", "sch"),
        ("ts", "z"),
        ("oy", "eu"),
        ("eye", "ei"),
        ("ow", "au"),
        ("uh", "ü"),
        ("oh", "ö"),
        ("ah", "ä"),
        ("ss", "ß"),
        ("k", "ch"),
    ),
    "la": (
        ("ae", "e"),
        ("v", "w"),
        ("c", "k"),
    ),
})

# Canonical answer -> recognizer variants that are known to stand for it.
MISHEARD_WORDS: Mapping[str, Mapping[str, Tuple[str, ...]]] = MappingProxyType({
    "fr": MappingProxyType({
        "le chien": ("le shien", "la shien", "luh shien"),
        "la maison": ("la mayson", "la meson"),
        "je suis": ("zhuh swee", "je swee"),
        "bonjour": ("bon zhour", "bonzhoor"),
        "merci": ("mersee", "mercy"),
        "oui": ("wee", "we"),
        "non": ("no", "noh"),
        "l'eau": ("lo", "loh"),
        "beau": ("bo", "boh"),
        "bleu": ("bluh", "bloo"),
    }),
    "es": MappingProxyType({
        "hola": ("ola", "oh la"),
        "gracias": ("grathias", "grasias"),
        "por favor": ("por fabor",),
        "bueno": ("bweno",),
        "niño": ("ninyo", "neenyo"),
        "año": ("anyo",),
    }),
    "de": MappingProxyType({
        "ich": ("ish", "ikh"),
        "nicht": ("nisht", "nikht"),
        "schön": ("shön", "shern"),
        "mädchen": ("medchen", "maedchen"),
        "straße": ("strasse", "shtrasse"),
    }),
})

ARTICLES: Mapping[str, Tuple[str, ...]] = MappingProxyType({
    "de": ("der", "die", "das", "ein", "eine", "einen", "einem", "einer"),
    "fr": ("le", "la", "les", "l'", "un", "une", "des"),
    "es": ("el", "la", "los", "las", "un", "una", "unos", "unas"),
    "la": (),
    "en": ("the", "a", "an"),
})

_ALL_FOREIGN_ARTICLES = tuple(sorted(
    {a for code in ("de", "fr", "es") for a in ARTICLES[code]},
    key=lambda a: (-len(a), a),
))


def articles_for(language: Optional[str]) -> Tuple[str, ...]:
    """Articles for a language, longest first.

    Unknown or missing languages get the union of the German, French and
    Spanish lists.
    """
    code = resolve_language(language)
    if code is None:
        return _ALL_FOREIGN_ARTICLES
    return tuple(sorted(ARTICLES.get(code, ()), key=lambda a: (-len(a), a)))


# Words a learner says while thinking; removed from voice transcripts.
FILLER_WORDS: Mapping[str, Tuple[str, ...]] = MappingProxyType({
    "de": (
        "ähm", "äh", "um", "hmm", "also", "ich glaube", "ich denke", "vielleicht",
        "das ist", "es ist", "moment", "warte", "lass mich überlegen", "ich weiß",
        "das wäre",
    ),
    "fr": (
        "euh", "um", "hmm", "je pense", "je crois", "peut-être", "c'est", "alors",
        "attends", "voyons",
    ),
    "es": (
        "eh", "um", "hmm", "creo que", "pienso que", "tal vez", "quizás", "es",
        "a ver", "espera",
    ),
    "en": (
        "um", "uh", "hmm", "i think", "i believe", "maybe", "it's", "that's",
        "let me think", "wait", "like",
    ),
    "la": ("um", "hmm"),
})

DONT_KNOW_PHRASES: Mapping[str, Tuple[str, ...]] = MappingProxyType({
    "de": (
        "weiß nicht", "weiß ich nicht", "keine ahnung", "pass", "ich weiß es nicht",
        "ich kann mich nicht erinnern", "hab ich vergessen", "fällt mir nicht ein",
    ),
    "fr": ("je ne sais pas", "sais pas", "aucune idée", "passe", "je sais pas", "j'ai oublié"),
    "es": ("no sé", "no lo sé", "ni idea", "paso", "no me acuerdo", "lo olvidé"),
    "en": (
        "don't know", "i don't know", "no idea", "pass", "skip", "can't remember",
        "forgot", "no clue",
    ),
    "la": ("nescio", "ignoro"),
})

# command -> trigger phrases
VOICE_COMMANDS: Mapping[str, Mapping[str, Tuple[str, ...]]] = MappingProxyType({
    "de": MappingProxyType({
        "repeat": ("nochmal", "wiederholen", "noch einmal", "bitte nochmal"),
        "skip": ("weiter", "überspringen", "nächstes", "skip"),
        "stop": ("stop", "aufhören", "beenden", "schluss", "fertig"),
        "hint": ("hinweis", "hilfe", "tipp"),
    }),
    "fr": MappingProxyType({
        "repeat": ("répète", "encore", "répéter", "encore une fois"),
        "skip": ("passe", "suivant", "sauter", "prochain"),
        "stop": ("stop", "arrête", "fini", "terminer"),
        "hint": ("indice", "aide", "hint"),
    }),
    "es": MappingProxyType({
        "repeat": ("repite", "otra vez", "repetir", "de nuevo"),
        "skip": ("salta", "siguiente", "pasar", "próximo"),
        "stop": ("para", "stop", "terminar", "acabar"),
        "hint": ("pista", "ayuda", "hint"),
    }),
    "en": MappingProxyType({
        "repeat": ("repeat", "again", "say again", "one more time"),
        "skip": ("skip", "next", "pass", "move on"),
        "stop": ("stop", "quit", "end", "finish", "that's enough"),
        "hint": ("hint", "help", "clue"),
    }),
    "la": MappingProxyType({
        "repeat": ("repete", "iterum"),
        "skip": ("transeo", "proximus"),
        "stop": ("siste", "finis"),
        "hint": ("auxilium",),
    }),
})
