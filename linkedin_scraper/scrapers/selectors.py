"""
Selector chains for LinkedIn pages.

LinkedIn serves several historical and current class-name schemes at the same
time across page variants, so every logical field gets an ordered list of
candidates, most specific first. Nobody publishes this markup: the lists are
maintained by observation and are neither exhaustive nor guaranteed current.
They are data, versioned by SELECTOR_SET_VERSION, and any chain can be
replaced from a JSON file without code changes (see load_selector_set).

Levels:
0. Current markup (pvs-/entity-result era, aria-hidden text spans)
1. Legacy markup (pv-entity era)
2. Structural / attribute patterns (generic but stable)
3. Last resort
"""

import copy
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Union

logger = logging.getLogger(__name__)

SELECTOR_SET_VERSION = "2024.06"

Strategy = Dict[str, Union[str, int]]


DEFAULT_CHAINS: Dict[str, List[Strategy]] = {
    # -------------------------------------------------------------------------
    # Search results page
    # -------------------------------------------------------------------------
    "search.container": [
        {"name": "results-container", "selector": ".search-results-container", "level": 0},
        {"name": "results-list", "selector": ".search-results__list", "level": 1},
        {"name": "result-container", "selector": ".reusable-search__result-container", "level": 1},
        {"name": "chameleon-urn", "selector": "[data-chameleon-result-urn]", "level": 2},
    ],
    "search.row": [
        {"name": "reusable-result", "selector": ".reusable-search__result-container", "level": 0},
        {"name": "search-result", "selector": ".search-result", "level": 1},
        {"name": "entity-result", "selector": ".entity-result", "level": 1},
        {"name": "chameleon-urn", "selector": "[data-chameleon-result-urn]", "level": 2},
    ],
    "search.no_results": [
        {"name": "no-results", "selector": ".search-reusable-search-no-results", "level": 0},
        {"name": "empty-state", "selector": ".artdeco-empty-state", "level": 1},
        {"name": "empty-headline", "selector": "h2.artdeco-empty-state__headline", "level": 1},
    ],
    "search.profile_url": [
        {"name": "in-link", "selector": "a[href*='/in/']", "level": 0},
        {"name": "app-aware-link", "selector": ".app-aware-link[href*='/in/']", "level": 0},
        {"name": "result-link", "selector": ".search-result__result-link", "level": 1},
        {"name": "control-srp-result", "selector": "[data-control-name='search_srp_result']", "level": 2},
    ],
    "search.name": [
        {"name": "title-text-hidden", "selector": ".entity-result__title-text a span[aria-hidden='true']", "level": 0},
        {"name": "result-link-hidden", "selector": ".search-result__result-link span[aria-hidden='true']", "level": 1},
        {"name": "actor-name", "selector": ".actor-name", "level": 1},
        {"name": "result-link", "selector": ".search-result__result-link", "level": 2},
    ],
    "search.headline": [
        {"name": "primary-subtitle", "selector": ".entity-result__primary-subtitle", "level": 0},
        {"name": "snippets", "selector": ".search-result__snippets", "level": 1},
        {"name": "subline", "selector": ".subline-level-1", "level": 1},
    ],

    # -------------------------------------------------------------------------
    # Profile page: top card
    # -------------------------------------------------------------------------
    "profile.name": [
        {"name": "left-panel-h1", "selector": ".pv-text-details__left-panel h1", "level": 0},
        {"name": "list-bullet-h1", "selector": ".pv-top-card--list-bullet .pv-text-details__left-panel h1", "level": 1},
        {"name": "top-card-list-h1", "selector": ".pv-top-card--list .pv-text-details__left-panel h1", "level": 1},
        {"name": "top-card-h1", "selector": ".pv-top-card .pv-text-details__left-panel h1", "level": 1},
        {"name": "heading-xlarge", "selector": "h1.text-heading-xlarge", "level": 2},
    ],
    "profile.headline": [
        {"name": "left-panel-body", "selector": ".pv-text-details__left-panel .text-body-medium.break-words", "level": 0},
        {"name": "list-bullet-body", "selector": ".pv-top-card--list-bullet .text-body-medium.break-words", "level": 1},
        {"name": "top-card-body", "selector": ".pv-top-card .pv-text-details__left-panel .text-body-medium", "level": 1},
        {"name": "top-card-list-body", "selector": ".pv-top-card--list .pv-text-details__left-panel .text-body-medium", "level": 1},
    ],
    "profile.location": [
        {"name": "left-panel-small", "selector": ".pv-text-details__left-panel .text-body-small.inline.t-black--light.break-words", "level": 0},
        {"name": "list-bullet-small", "selector": ".pv-top-card--list-bullet .text-body-small.inline.t-black--light.break-words", "level": 1},
        {"name": "top-card-small", "selector": ".pv-top-card .pv-text-details__left-panel .text-body-small.inline", "level": 1},
    ],
    "profile.about": [
        {"name": "about-show-more", "selector": ".pv-about-section .pv-shared-text-with-see-more", "level": 0},
        {"name": "about-summary", "selector": ".pv-about__summary-text", "level": 1},
        {"name": "about-anchor", "selector": "#about .pv-shared-text-with-see-more", "level": 1},
        {"name": "about-inline", "selector": "section:has(#about) .inline-show-more-text span[aria-hidden='true']", "level": 2},
    ],
    "profile.about_expand": [
        {"name": "aria-show-more-about", "selector": "button[aria-label='Show more about section']", "level": 0},
        {"name": "inline-show-more", "selector": "section:has(#about) button.inline-show-more-text__button", "level": 2},
    ],
    "profile.experience_expand": [
        {"name": "aria-experience", "selector": "button[aria-label*='experience']", "level": 0},
    ],
    "profile.skills_expand": [
        {"name": "aria-skills", "selector": "button[aria-label*='skills']", "level": 0},
    ],

    # -------------------------------------------------------------------------
    # Profile page: experience
    # -------------------------------------------------------------------------
    "experience.items": [
        {"name": "experience-section", "selector": ".pv-experience-section .pv-profile-section__list-item", "level": 0},
        {"name": "experience-anchor", "selector": "#experience .pv-profile-section__list-item", "level": 1},
        {"name": "experience-artdeco", "selector": "section:has(#experience) li.artdeco-list__item", "level": 2},
    ],
    "experience.title": [
        {"name": "summary-h3", "selector": ".pv-entity__summary-info h3", "level": 0},
        {"name": "summary-bold", "selector": ".pv-entity__summary-info .t-16.t-black.t-bold", "level": 1},
        {"name": "bold-hidden", "selector": "div.t-bold span[aria-hidden='true']", "level": 2},
    ],
    "experience.organization": [
        {"name": "secondary-title", "selector": ".pv-entity__secondary-title", "level": 0},
        {"name": "summary-normal", "selector": ".pv-entity__summary-info .t-14.t-black.t-normal", "level": 1},
        {"name": "normal-hidden", "selector": "span.t-14.t-normal:not(.t-black--light) span[aria-hidden='true']", "level": 2},
    ],
    "experience.duration": [
        {"name": "date-range", "selector": ".pv-entity__date-range", "level": 0},
        {"name": "summary-light", "selector": ".pv-entity__summary-info .t-14.t-black--light", "level": 1},
        {"name": "light-hidden", "selector": "span.t-14.t-normal.t-black--light span[aria-hidden='true']", "level": 2},
    ],
    "experience.description": [
        {"name": "entity-description", "selector": ".pv-entity__description", "level": 0},
        {"name": "extra-details", "selector": ".pv-entity__extra-details", "level": 1},
        {"name": "inline-show-more", "selector": "div.inline-show-more-text span[aria-hidden='true']", "level": 2},
    ],

    # -------------------------------------------------------------------------
    # Profile page: education
    # -------------------------------------------------------------------------
    "education.items": [
        {"name": "education-section", "selector": ".pv-education-section .pv-profile-section__list-item", "level": 0},
        {"name": "education-anchor", "selector": "#education .pv-profile-section__list-item", "level": 1},
        {"name": "education-artdeco", "selector": "section:has(#education) li.artdeco-list__item", "level": 2},
    ],
    "education.institution": [
        {"name": "school-name", "selector": ".pv-entity__school-name", "level": 0},
        {"name": "bold-hidden", "selector": "div.t-bold span[aria-hidden='true']", "level": 2},
    ],
    "education.degree": [
        {"name": "degree-name", "selector": ".pv-entity__degree-name", "level": 0},
        {"name": "normal-hidden", "selector": "span.t-14.t-normal:not(.t-black--light) span[aria-hidden='true']", "level": 2},
    ],
    "education.dates": [
        {"name": "entity-dates", "selector": ".pv-entity__dates", "level": 0},
        {"name": "light-hidden", "selector": "span.t-14.t-normal.t-black--light span[aria-hidden='true']", "level": 2},
    ],

    # -------------------------------------------------------------------------
    # Profile page: skills
    # -------------------------------------------------------------------------
    "skills.items": [
        {"name": "skills-section", "selector": ".pv-skills-section .pv-skill-category-entity", "level": 0},
        {"name": "skills-anchor", "selector": "#skills .pv-skill-category-entity", "level": 1},
        {"name": "skills-artdeco", "selector": "section:has(#skills) li.artdeco-list__item", "level": 2},
    ],
    "skills.name": [
        {"name": "skill-name-text", "selector": ".pv-skill-category-entity__name-text", "level": 0},
        {"name": "bold-hidden", "selector": "div.t-bold span[aria-hidden='true']", "level": 2},
        {"name": "item-text", "selector": ":scope", "level": 3},
    ],

    # -------------------------------------------------------------------------
    # Profile page: licenses & certifications
    # -------------------------------------------------------------------------
    "certifications.items": [
        {"name": "certifications-section", "selector": ".pv-certifications-section .pv-profile-section__list-item", "level": 0},
        {"name": "certifications-anchor", "selector": "#certifications .pv-profile-section__list-item", "level": 1},
        {"name": "licenses-artdeco", "selector": "section:has(#licenses_and_certifications) li.artdeco-list__item", "level": 2},
    ],
    "certifications.name": [
        {"name": "summary-h3", "selector": ".pv-certifications__summary-info h3", "level": 0},
        {"name": "bold-hidden", "selector": "div.t-bold span[aria-hidden='true']", "level": 2},
    ],
    "certifications.issuer": [
        {"name": "issuer", "selector": ".pv-certifications__issuer", "level": 0},
        {"name": "secondary-title", "selector": ".pv-entity__secondary-title", "level": 1},
        {"name": "normal-hidden", "selector": "span.t-14.t-normal:not(.t-black--light) span[aria-hidden='true']", "level": 2},
    ],
    "certifications.dates": [
        {"name": "date-range", "selector": ".pv-certifications__date-range", "level": 0},
        {"name": "bullet-item", "selector": ".pv-entity__bullet-item-v2", "level": 1},
        {"name": "light-hidden", "selector": "span.t-14.t-normal.t-black--light span[aria-hidden='true']", "level": 2},
    ],
    "certifications.credential_id": [
        {"name": "credential-id", "selector": ".pv-certifications__credential-id", "level": 0},
        {"name": "light-hidden", "selector": "span.t-14.t-normal.t-black--light span[aria-hidden='true']", "level": 2},
    ],

    # -------------------------------------------------------------------------
    # Login form (also the login-wall signal)
    # -------------------------------------------------------------------------
    "login.identifier": [
        {"name": "session-key", "selector": "input[name='session_key']", "level": 0},
        {"name": "username-id", "selector": "#username", "level": 1},
    ],
    "login.secret": [
        {"name": "session-password", "selector": "input[name='session_password']", "level": 0},
        {"name": "password-id", "selector": "#password", "level": 1},
    ],
    "login.submit": [
        {"name": "submit-button", "selector": "button[type='submit']", "level": 0},
        {"name": "litms-submit", "selector": "button[data-litms-control-urn='login-submit']", "level": 1},
    ],
}


@dataclass
class SelectorSet:
    """A named, versioned collection of selector chains."""
    version: str = SELECTOR_SET_VERSION
    chains: Dict[str, List[Strategy]] = field(
        default_factory=lambda: copy.deepcopy(DEFAULT_CHAINS)
    )

    def get(self, name: str) -> List[Strategy]:
        try:
            return self.chains[name]
        except KeyError:
            raise KeyError(f"No selector chain named {name!r} in selector set {self.version}")

    def with_overrides(self, overrides: Dict[str, list], version: Optional[str] = None) -> "SelectorSet":
        """
        Return a copy with whole chains replaced.

        Override entries may be full strategy dicts or bare CSS strings; bare
        strings are numbered in list order.
        """
        chains = copy.deepcopy(self.chains)
        for name, entries in overrides.items():
            if name not in chains:
                logger.warning(f"Selector override for unknown chain {name!r} ignored")
                continue
            chains[name] = [_as_strategy(entry, i) for i, entry in enumerate(entries)]
        return SelectorSet(version=version or self.version, chains=chains)


def _as_strategy(entry: Union[str, Strategy], index: int) -> Strategy:
    if isinstance(entry, str):
        return {"name": f"override-{index}", "selector": entry, "level": index}
    return {
        "name": str(entry.get("name", f"override-{index}")),
        "selector": str(entry["selector"]),
        "level": int(entry.get("level", index)),
    }


def load_selector_set(path: Optional[str] = None) -> SelectorSet:
    """
    Load the default selector set, applying overrides from a JSON file.

    File shape: {"version": "...", "chains": {"search.row": [...], ...}}.
    A missing or unreadable file leaves the defaults in place.
    """
    selector_set = SelectorSet()
    if not path:
        return selector_set

    override_path = Path(path)
    if not override_path.exists():
        logger.warning(f"Selector override file {override_path} not found, using built-in selectors")
        return selector_set

    try:
        data = json.loads(override_path.read_text(encoding="utf-8"))
        chains = data.get("chains", {})
        selector_set = selector_set.with_overrides(chains, version=data.get("version"))
    except (OSError, ValueError, AttributeError, KeyError, TypeError) as e:
        logger.error(f"Could not read selector overrides from {override_path}: {e}")
        return SelectorSet()

    logger.info(
        f"Loaded selector set {selector_set.version} with {len(chains)} overridden chains "
        f"from {override_path}"
    )
    return selector_set
