"""
Tests for the cplx command.
"""

import json

import pytest
from click.testing import CliRunner

from complex_ops.cli import main, selected_operation, split_operands
from complex_ops.errors import ConfigurationError
from complex_ops.operations import Operation


@pytest.fixture
def runner():
    return CliRunner()


class TestFlagResolution:
    """Test option helpers."""

    def test_no_flag_selects_conjugate(self):
        assert selected_operation({'op_sin': False, 'op_cos': False}) is Operation.CONJUGATE

    def test_single_flag(self):
        assert selected_operation({'op_sin': False, 'op_log10': True}) is Operation.LOG10

    def test_conflicting_flags(self):
        with pytest.raises(ConfigurationError, match="--sin, --cos are mutually exclusive"):
            selected_operation({'op_sin': True, 'op_cos': True})

    def test_split_operands(self):
        assert split_operands(("2",), batch=False) == ("2", None)
        assert split_operands(("2", "3"), batch=False) == ("2", "3")
        assert split_operands((), batch=True) == (None, None)
        assert split_operands(("3",), batch=True) == (None, "3")

    def test_split_operands_errors(self):
        with pytest.raises(ConfigurationError, match="Missing primary operand"):
            split_operands((), batch=False)
        with pytest.raises(ConfigurationError):
            split_operands(("1", "2", "3"), batch=False)
        with pytest.raises(ConfigurationError):
            split_operands(("1", "2"), batch=True)


class TestSingleOperand:
    """Single-shot invocations."""

    def test_default_conjugate(self, runner):
        result = runner.invoke(main, ["2+3j"])
        assert result.exit_code == 0
        assert result.output.startswith("2.000000-3.000000j")

    def test_negate(self, runner):
        result = runner.invoke(main, ["2+3j", "--negate"])
        assert result.exit_code == 0
        assert result.output.startswith("-2.000000-3.000000j")

    def test_negative_operand_after_separator(self, runner):
        result = runner.invoke(main, ["--negate", "--", "-2-3j"])
        assert result.exit_code == 0
        assert result.output.startswith("2.000000+3.000000j")

    def test_negative_operand_without_separator(self, runner):
        result = runner.invoke(main, ["-2-3j", "--negate"])
        assert result.exit_code == 0
        assert result.output.startswith("2.000000+3.000000j")

    def test_negative_second_operand(self, runner):
        result = runner.invoke(main, ["2", "-1", "--pow"])
        assert result.exit_code == 0
        assert result.output.startswith("0.500000")

    def test_negative_option_value_is_not_an_operand(self, runner):
        result = runner.invoke(main, ["2", "--precision", "-1"])
        assert result.exit_code == 2

    def test_abs_prints_scalar(self, runner):
        result = runner.invoke(main, ["3", "--abs"])
        assert result.exit_code == 0
        assert result.output == "3.000000\n"

    def test_log_json(self, runner):
        result = runner.invoke(main, ["2+3j", "2", "--log", "--format", "json"])
        assert result.exit_code == 0
        payload = json.loads(result.output)
        assert payload['operation'] == 'log'
        assert payload['input'] == pytest.approx({'real': 2.0, 'imaginary': 3.0,
                                                  'magnitude': 3.605551275463989,
                                                  'phase': 0.982793723247329})
        assert payload['result']['real'] == pytest.approx(1.85021985907055)
        assert payload['result']['imaginary'] == pytest.approx(1.41787163074572)
        assert payload['result']['magnitude'] == pytest.approx(2.331, abs=1e-3)
        assert payload['result']['phase'] == pytest.approx(0.6539, abs=1e-4)

    def test_pow_accepts_numeric_string(self, runner):
        as_string = runner.invoke(main, ["1+2j", "2", "--pow"])
        as_float = runner.invoke(main, ["1+2j", "2.0", "--pow"])
        assert as_string.exit_code == 0
        assert as_string.output == as_float.output
        assert as_string.output.startswith("-3.000000+4.000000j")

    def test_precision_from_environment(self, runner):
        result = runner.invoke(main, ["2+3j"], env={"CPLX_PRECISION": "2"})
        assert result.exit_code == 0
        assert result.output.startswith("2.00-3.00j")


    def test_log10_of_zero_json(self, runner):
        result = runner.invoke(main, ["0", "--log10", "--format", "json"])
        assert result.exit_code == 0
        payload = json.loads(result.output)
        assert payload['result']['real'] == '-inf'


class TestUsageErrors:
    """Invalid option combinations exit with status 2."""

    def test_conflicting_flags(self, runner):
        result = runner.invoke(main, ["2", "--sin", "--cos"])
        assert result.exit_code == 2
        assert "mutually exclusive" in result.output

    def test_binary_without_argument(self, runner):
        result = runner.invoke(main, ["2", "--pow"])
        assert result.exit_code == 2
        assert "requires a second operand" in result.output

    def test_unary_with_argument(self, runner):
        result = runner.invoke(main, ["2", "3", "--sin"])
        assert result.exit_code == 2

    def test_missing_operand(self, runner):
        result = runner.invoke(main, ["--sin"])
        assert result.exit_code == 2


class TestFailures:
    """Conversion and computation failures exit with status 1."""

    def test_unconvertible_argument(self, runner):
        result = runner.invoke(main, ["2", "abc", "--pow"])
        assert result.exit_code == 1
        assert "Cannot convert 'abc'" in result.output

    def test_unconvertible_operand(self, runner):
        result = runner.invoke(main, ["abc"])
        assert result.exit_code == 1

    def test_reciprocal_of_zero(self, runner):
        result = runner.invoke(main, ["0", "--reciprocal"])
        assert result.exit_code == 1
        assert "multiplicative inverse" in result.output


class TestBatch:
    """Batch input through --input."""

    def test_json_batch_preserves_order(self, runner):
        result = runner.invoke(main, ["--negate", "--format", "json", "-i", "-"],
                               input="1+1j\nfoo\n\n2\n")
        assert result.exit_code == 1

        lines = [json.loads(line) for line in result.output.splitlines()]
        assert len(lines) == 3
        assert lines[0]['result']['real'] == -1.0
        assert lines[1]['input'] == "foo"
        assert lines[1]['error']['type'] == 'InputConversionError'
        assert lines[2]['result']['real'] == -2.0

    def test_batch_with_second_operand(self, runner):
        with runner.isolated_filesystem():
            with open("values.txt", "w") as fh:
                fh.write("# powers\n2\n1j\n")
            result = runner.invoke(main, ["--pow", "-i", "values.txt", "2"])

        assert result.exit_code == 0
        lines = result.output.splitlines()
        assert lines[0].startswith("2.000000+0.000000j -> 4.000000+0.000000j")
        assert lines[1].startswith("0.000000+1.000000j -> -1.000000+0.000000j")

    def test_batch_rejects_extra_positionals(self, runner):
        result = runner.invoke(main, ["--sqrt", "-i", "-", "1", "2"], input="4\n")
        assert result.exit_code == 2
