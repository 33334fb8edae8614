# doclet_engine/doclet_schema.py

"""
Serialized form of the DocletModel.
This module defines the JSON-ready structure handed to external renderers,
converts a DocletModel into it and validates the result.
"""

from typing import TypedDict, List, Optional, Any, Dict
import logging

from .model import ClassSymbol, Diagnostic, DocletModel, Reference, Symbol, UnattachedComment

logger = logging.getLogger(__name__)


class ParameterDict(TypedDict, total=False):
    """A documented parameter."""
    name: str
    type: Optional[str]
    description: str
    optional: bool


class ReferenceDict(TypedDict, total=False):
    """A @see or {@link} target."""
    target: str
    label: Optional[str]
    resolved: Optional[str]


class SymbolDict(TypedDict, total=False):
    """A documented class, member or function."""
    name: str
    short_name: str
    role: str
    owner: Optional[str]
    description: str
    parameters: List[ParameterDict]
    declared_parameters: List[str]
    returns: Optional[Dict[str, Optional[str]]]
    see: List[ReferenceDict]
    links: List[ReferenceDict]
    throws: List[str]
    is_constructor: bool
    deprecated: Optional[str]
    author: Optional[str]
    tags: List[Dict[str, str]]
    source: Optional[str]
    line: int
    implemented_by: Optional[str]
    state: str
    # classes only
    members: List[str]
    base_class: Optional[str]
    base_resolved: bool


class DocletModelDict(TypedDict, total=False):
    """Complete serialized model."""
    sources: List[str]
    symbols: List[SymbolDict]
    free_functions: List[str]
    implementations: Dict[str, str]
    unattached: List[Dict[str, Any]]
    diagnostics: List[Dict[str, Any]]


def _reference_to_dict(reference: Reference) -> ReferenceDict:
    return {
        'target': reference.target,
        'label': reference.label,
        'resolved': reference.resolved,
    }


def symbol_to_dict(symbol: Symbol) -> SymbolDict:
    """Convert one symbol to its serialized form."""
    data: SymbolDict = {
        'name': symbol.name,
        'short_name': symbol.short_name,
        'role': symbol.role.value,
        'owner': symbol.owner,
        'description': symbol.description,
        'parameters': [
            {'name': p.name, 'type': p.type, 'description': p.description, 'optional': p.optional}
            for p in symbol.params
        ],
        'declared_parameters': list(symbol.declared_params),
        'returns': None,
        'see': [_reference_to_dict(r) for r in symbol.see],
        'links': [_reference_to_dict(r) for r in symbol.links],
        'throws': list(symbol.throws),
        'is_constructor': symbol.is_constructor,
        'deprecated': symbol.deprecated,
        'author': symbol.author,
        'tags': [{'tag': c.tag, 'name': c.name, 'description': c.description} for c in symbol.clauses],
        'source': symbol.location.source_id if symbol.location else None,
        'line': symbol.location.line if symbol.location else 0,
        'implemented_by': symbol.implemented_by,
        'state': symbol.state.value,
    }
    if symbol.returns is not None:
        data['returns'] = {'type': symbol.returns_type, 'description': symbol.returns}
    if isinstance(symbol, ClassSymbol):
        data['members'] = [m.name for m in symbol.members]
        data['base_class'] = symbol.base_class
        data['base_resolved'] = symbol.base_resolved
    return data


def _unattached_to_dict(entry: UnattachedComment) -> Dict[str, Any]:
    return {
        'source': entry.source_id,
        'line': entry.line,
        'reason': entry.reason,
        'description': entry.doclet.description if entry.doclet else '',
        'construct': entry.construct.path if entry.construct else None,
    }


def _diagnostic_to_dict(diagnostic: Diagnostic) -> Dict[str, Any]:
    return {
        'kind': diagnostic.kind.value,
        'severity': diagnostic.severity,
        'message': diagnostic.message,
        'source': diagnostic.source_id,
        'line': diagnostic.line,
    }


def model_to_dict(model: DocletModel) -> DocletModelDict:
    """
    Convert a DocletModel into plain dicts and lists.

    Args:
        model: Linked model

    Returns:
        JSON-serializable structure
    """
    return {
        'sources': list(model.sources),
        'symbols': [symbol_to_dict(s) for s in model.symbols.values()],
        'free_functions': [s.name for s in model.free_functions],
        'implementations': dict(model.implementations),
        'unattached': [_unattached_to_dict(u) for u in model.unattached],
        'diagnostics': [_diagnostic_to_dict(d) for d in model.diagnostics],
    }


class DocletValidator:
    """Validates serialized models before they are handed to a renderer."""

    @staticmethod
    def validate_parameter(param: dict) -> bool:
        """Validates a parameter structure."""
        if not isinstance(param, dict):
            logger.error("Parameter must be a dictionary")
            return False

        if 'name' not in param:
            logger.error("Parameter must have a 'name' field")
            return False

        return True

    @staticmethod
    def validate_reference(reference: dict) -> bool:
        """Validates a @see / {@link} reference."""
        if not isinstance(reference, dict) or not reference.get('target'):
            logger.error("Reference must be a dictionary with a 'target'")
            return False
        return True

    @staticmethod
    def validate_symbol(symbol: dict) -> bool:
        """Validates a symbol structure."""
        if not isinstance(symbol, dict):
            logger.error("Symbol must be a dictionary")
            return False

        for key in ('name', 'role'):
            if key not in symbol:
                logger.error(f"Symbol must have a '{key}' field")
                return False

        if not isinstance(symbol.get('parameters', []), list):
            logger.error(f"Parameters of {symbol['name']} must be a list")
            return False
        for param in symbol.get('parameters', []):
            if not DocletValidator.validate_parameter(param):
                return False

        for key in ('see', 'links'):
            for reference in symbol.get(key, []):
                if not DocletValidator.validate_reference(reference):
                    return False

        if symbol['role'] == 'constructor' and not isinstance(symbol.get('members', []), list):
            logger.error(f"Members of class {symbol['name']} must be a list")
            return False

        return True

    @staticmethod
    def validate_model(data: dict) -> bool:
        """Validates the complete serialized model."""
        if not isinstance(data, dict):
            logger.error("Doclet model must be a dictionary")
            return False

        required_keys = {'sources', 'symbols'}
        if not required_keys.issubset(data.keys()):
            missing = required_keys - data.keys()
            logger.error(f"Doclet model missing required keys: {missing}")
            return False

        if not isinstance(data['symbols'], list):
            logger.error("Doclet model symbols must be a list")
            return False

        names = set()
        for symbol in data['symbols']:
            if not DocletValidator.validate_symbol(symbol):
                logger.error("Invalid symbol structure in doclet model")
                return False
            names.add(symbol['name'])

        for name in data.get('free_functions', []):
            if name not in names:
                logger.error(f"Free function {name} is not in the symbol list")
                return False

        logger.debug("Doclet model structure validated successfully")
        return True
