"""Schema merge and synthesis.

Turns frozen ObservedClass aggregates into one ClassSchema per class:

- every observed property is typed by the inference cascade
- ``optional`` is set when the property is missing from some instance
- static hints, when given, take part according to the hint policy:
  ``advisory`` only logs them, ``compatible`` lets the narrowest hinted type
  that parses every observed value replace the cascade's choice
- names are normalized for the backend grammar and everything is sorted, so
  identical corpora always produce identical documents
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from entschema.config.models import HintPolicy, IdentifierGrammar
from entschema.core.logging import get_logger
from entschema.corpus.ingest import ObservedClass
from entschema.inference.cascade import classify
from entschema.inference.parsers import parses
from entschema.inference.types import SemanticType
from entschema.schema.models import ClassSchema, PropertySchema, SchemaDocument
from entschema.schema.naming import class_identifiers, normalize_names
from entschema.sdk.index import SdkIndex

log = get_logger("merge")


def resolve_type(
    classname: str,
    property_name: str,
    values: Sequence[str],
    hinted: Sequence[SemanticType] = (),
    policy: HintPolicy = "advisory",
) -> SemanticType:
    """Type one property from its observed values and optional static hints."""
    inferred = classify(property_name, values)
    if not hinted:
        return inferred

    compatible = sorted(
        (ty for ty in hinted if all(parses(ty, value) for value in values)),
        key=lambda ty: ty.rank,
    )

    if policy == "advisory":
        log.debug(
            "hint_advisory",
            classname=classname,
            property=property_name,
            inferred=inferred.value,
            hinted=[ty.value for ty in hinted],
            agrees=inferred in hinted,
        )
        return inferred

    if not compatible:
        log.warning(
            "hint_incompatible",
            classname=classname,
            property=property_name,
            inferred=inferred.value,
            hinted=[ty.value for ty in hinted],
        )
        return inferred

    chosen = compatible[0]
    if chosen != inferred:
        log.info(
            "hint_override",
            classname=classname,
            property=property_name,
            inferred=inferred.value,
            chosen=chosen.value,
        )
    return chosen


def synthesize_class(
    observed: ObservedClass,
    identifier: str,
    *,
    hints: Mapping[str, Sequence[SemanticType]] | None = None,
    hint_policy: HintPolicy = "advisory",
    grammar: IdentifierGrammar = "rust",
) -> ClassSchema:
    hints = hints or {}
    names = normalize_names(observed.properties, grammar)

    properties = []
    for raw_name, values in observed.properties.items():
        semantic_type = resolve_type(
            observed.name, raw_name, values, hints.get(raw_name, ()), hint_policy
        )
        name = names[raw_name]
        properties.append(
            PropertySchema(
                name=name,
                type=semantic_type,
                optional=observed.is_optional(raw_name),
                rename_from=raw_name if name != raw_name else None,
            )
        )
    properties.sort(key=lambda prop: prop.name)

    return ClassSchema(
        classname=observed.name,
        identifier=identifier,
        occurrences=observed.occurrences,
        reference_bearing=any(prop.type is SemanticType.STRING for prop in properties),
        properties=tuple(properties),
    )


def synthesize(
    classes: Mapping[str, ObservedClass],
    index: SdkIndex | None = None,
    *,
    hint_policy: HintPolicy = "advisory",
    grammar: IdentifierGrammar = "rust",
) -> SchemaDocument:
    """Build the schema document for every observed class."""
    identifiers = class_identifiers(classes, grammar)
    schemas = [
        synthesize_class(
            observed,
            identifiers[name],
            hints=index.hints_for_entity(name) if index is not None else None,
            hint_policy=hint_policy,
            grammar=grammar,
        )
        for name, observed in classes.items()
    ]
    schemas.sort(key=lambda schema: schema.identifier)
    log.info(
        "schemas_synthesized",
        classes=len(schemas),
        properties=sum(len(schema.properties) for schema in schemas),
        hint_policy=hint_policy if index is not None else None,
    )
    return SchemaDocument(classes=tuple(schemas))
