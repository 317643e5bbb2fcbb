"""
BioGloss Term Catalog
Static domain dictionaries used to tag scientific terms
"""

import json
import logging
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Tuple

import yaml

from .config import DICTIONARY_MODES, SOURCE_MODES

logger = logging.getLogger(__name__)

# Embedded domain dictionaries, one section per dictionary mode
CATALOG_YAML = """
micro:
  pathogen: "A microorganism that can cause disease."
  virulence: "The degree of pathogenicity of a microorganism."
  biofilm: "A structured community of microorganisms within a matrix."

genetics:
  genome: "The complete set of DNA in an organism."
  allele: "One of two or more versions of a gene."
  mutation: "A permanent change in DNA sequence."

immunology:
  antigen: "A molecule recognized by the immune system."
  antibody: "A protein produced by B cells that binds antigens."
  cytokine: "A signaling protein in the immune system."

biology:
  homeostasis: "Maintenance of internal stability."
  metabolism: "Chemical processes that maintain life."
  osmosis: "Diffusion of water across a membrane."

chemistry:
  molarity: "Concentration expressed as moles per liter."
  catalyst: "A substance that speeds up a reaction."
  polymer: "A molecule made of repeating units."
"""

# Human readable names for the dictionary modes
MODE_LABELS = {
    "micro": "Microbiology",
    "genetics": "Genetics",
    "immunology": "Immunology",
    "biology": "Biology",
    "chemistry": "Chemistry",
    "combined": "Combined",
}


class TermCatalog:
    """
    Family of immutable term -> definition mappings, one per dictionary mode
    """

    def __init__(self, sources: Optional[Dict[str, Dict[str, str]]] = None):
        """
        Initialize the catalog

        Args:
            sources: Optional mapping of mode name to {term: definition}.
                Modes missing from it use the built-in dictionaries.
        """
        builtin = yaml.safe_load(CATALOG_YAML)
        sources = sources or {}

        unknown = set(sources) - set(SOURCE_MODES)
        if unknown:
            raise ValueError(f"Unknown dictionary modes in catalog: {', '.join(sorted(unknown))}")

        self._dictionaries: Dict[str, Mapping[str, str]] = {}
        for mode in SOURCE_MODES:
            terms = sources.get(mode, builtin.get(mode) or {})
            # Normalize keys to lowercase for consistent lookup
            self._dictionaries[mode] = MappingProxyType(
                {str(term).lower(): str(definition) for term, definition in terms.items()}
            )

        # Union in assembly order, later sources override earlier ones
        combined: Dict[str, str] = {}
        for mode in SOURCE_MODES:
            combined.update(self._dictionaries[mode])
        self._dictionaries["combined"] = MappingProxyType(combined)

        logger.info(f"Loaded term catalog with {len(combined)} terms across {len(SOURCE_MODES)} dictionaries")

    @classmethod
    def from_yaml_file(cls, path: str) -> 'TermCatalog':
        """Load custom dictionaries from a YAML file of {mode: {term: definition}}"""
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ValueError(f"Failed to load catalog from {path}: {e}")

        if not isinstance(data, dict) or not all(isinstance(v, dict) for v in data.values()):
            raise ValueError(f"Catalog file {path} must map dictionary modes to term tables")

        return cls(sources=data)

    def for_mode(self, mode: str) -> Mapping[str, str]:
        """Return the immutable dictionary for a mode"""
        try:
            return self._dictionaries[mode]
        except KeyError:
            raise ValueError(f"Unknown dictionary mode: {mode}")

    def get_definition(self, term: str, mode: str = "combined") -> Optional[str]:
        """
        Get definition for a specific term

        Args:
            term: Term to look up
            mode: Dictionary mode to consult

        Returns:
            Definition or None if not found
        """
        return self.for_mode(mode).get(term.lower())

    def search_terms(self, query: str, mode: str = "combined") -> List[Tuple[str, str]]:
        """
        Search for terms containing query string

        Args:
            query: Search query
            mode: Dictionary mode to search

        Returns:
            List of (term, definition) tuples, best matches first
        """
        query_lower = query.lower()
        results = [
            (term, definition)
            for term, definition in self.for_mode(mode).items()
            if query_lower in term or query_lower in definition.lower()
        ]

        def sort_key(item):
            term = item[0]
            if term == query_lower:
                return (0, len(term), term)
            elif term.startswith(query_lower):
                return (1, len(term), term)
            elif query_lower in term:
                return (2, len(term), term)
            return (3, len(term), term)

        results.sort(key=sort_key)
        return results

    def export_catalog(self, mode: str = "combined", format: str = "json") -> str:
        """
        Export one dictionary in different formats

        Args:
            mode: Dictionary mode to export
            format: Export format ("json", "yaml", "csv", "html")

        Returns:
            Formatted dictionary string
        """
        terms = dict(sorted(self.for_mode(mode).items()))

        if format == "json":
            return json.dumps(terms, indent=2, ensure_ascii=False)

        elif format == "yaml":
            return yaml.dump(terms, default_flow_style=False, allow_unicode=True)

        elif format == "csv":
            lines = ["term,definition"]
            for term, definition in terms.items():
                # Escape quotes and commas
                definition = definition.replace('"', '""')
                if ',' in definition or '"' in definition:
                    definition = f'"{definition}"'
                lines.append(f"{term},{definition}")
            return "\n".join(lines)

        elif format == "html":
            from html import escape

            html = "<dl>\n"
            for term, definition in terms.items():
                html += f"  <dt><strong>{escape(term)}</strong></dt>\n"
                html += f"  <dd>{escape(definition)}</dd>\n"
            html += "</dl>"
            return html

        else:
            raise ValueError(f"Unknown format: {format}")

    def get_stats(self) -> Dict[str, int]:
        """Get term counts per dictionary"""
        return {mode: len(self._dictionaries[mode]) for mode in DICTIONARY_MODES}


_DEFAULT_CATALOG: Optional[TermCatalog] = None


def default_catalog() -> TermCatalog:
    """Return the built-in catalog, built once per process"""
    global _DEFAULT_CATALOG
    if _DEFAULT_CATALOG is None:
        _DEFAULT_CATALOG = TermCatalog()
    return _DEFAULT_CATALOG
