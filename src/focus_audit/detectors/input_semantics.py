"""Form input labelling and type adequacy for mobile keyboards."""

from ..schemas import InputSemanticsResult, NodeSnapshot

MOBILE_INPUT_TYPES = frozenset(
    {"email", "tel", "number", "url", "search", "text", "password"}
)


class InputSemanticsClassifier:
    """Checks that an input is labelled and uses a suitable type.

    The label lookup needs the document, so the caller resolves whether a
    ``label[for=<id>]`` exists and passes the answer in.
    """

    def __init__(self, valid_types=MOBILE_INPUT_TYPES):
        self.valid_types = frozenset(valid_types)

    def classify(
        self, snapshot: NodeSnapshot, has_external_label: bool = False
    ) -> InputSemanticsResult:
        """Classify one input.

        Args:
            snapshot: The input element.
            has_external_label: A label element targets this input's id.

        Returns:
            InputSemanticsResult with "no label" and/or "bad type" failures.
        """
        result = InputSemanticsResult(passed=True)

        placeholder = (snapshot.attr("placeholder") or "").strip()
        if has_external_label:
            result.has_label = True
            result.label_source = "label"
        elif placeholder:
            result.has_label = True
            result.label_source = "placeholder"
        else:
            result.failures.append("no label")

        input_type = snapshot.attr("type")
        if input_type is None and snapshot.tag_name == "input":
            # A missing type attribute renders as a text input.
            input_type = "text"
        result.input_type = input_type
        result.valid_type = input_type is not None and input_type.lower() in self.valid_types
        if not result.valid_type:
            result.failures.append("bad type")

        result.passed = not result.failures
        if result.failures:
            name = snapshot.attr("name") or snapshot.attr("id") or "unnamed"
            result.evidence.append(
                f"Input '{name}' (type={input_type}): {', '.join(result.failures)}"
            )
        return result
