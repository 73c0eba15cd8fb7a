import io

import pytest

from mandelgray import Viewport
from mandelgray.prompt import parse_complex, prompt_complex, prompt_number, prompt_parameters


def scripted(*answers):
    replies = iter(answers)
    prompts = []

    def input_fn(prompt):
        prompts.append(prompt)
        try:
            return next(replies)
        except StopIteration:
            raise EOFError from None

    input_fn.prompts = prompts
    return input_fn


@pytest.mark.parametrize(
    "text,expected",
    [
        ("0", 0j),
        ("-0.75", complex(-0.75, 0.0)),
        ("-2+1.2i", complex(-2.0, 1.2)),
        ("0.5 - 1.2i", complex(0.5, -1.2)),
        ("1j", 1j),
        ("-0.8, 0.156", complex(-0.8, 0.156)),
    ],
)
def test_parse_complex(text, expected):
    assert parse_complex(text) == expected


@pytest.mark.parametrize("text", ["", "abc", "1+", "1,2,3"])
def test_parse_complex_rejects_garbage(text):
    with pytest.raises(ValueError):
        parse_complex(text)


def test_prompt_number_retries_until_valid():
    stderr = io.StringIO()
    input_fn = scripted("twelve", " 12 ")
    assert prompt_number("Enter image width: ", input_fn=input_fn, stderr=stderr) == 12
    assert input_fn.prompts == ["Enter image width: "] * 2
    assert "Invalid input" in stderr.getvalue()


def test_prompt_number_uses_parser():
    assert prompt_number("scale: ", float, input_fn=scripted("0.5625"), stderr=io.StringIO()) == 0.5625


def test_prompt_propagates_end_of_input():
    with pytest.raises(EOFError):
        prompt_number("width: ", input_fn=scripted("x"), stderr=io.StringIO())


def test_prompt_complex():
    value = prompt_complex("origin: ", input_fn=scripted("nope", "-0.5+0.25i"), stderr=io.StringIO())
    assert value == complex(-0.5, 0.25)


def test_prompt_parameters_asks_in_order():
    stderr = io.StringIO()
    input_fn = scripted("640", "0", "480", "0", "0.5", "-0.5+0i", "-3", "250")
    params = prompt_parameters(input_fn=input_fn, stderr=stderr)
    assert params.width == 640
    assert params.height == 480
    assert params.iteration_max == 250
    assert params.viewport == Viewport.from_scale(complex(-0.5, 0.0), 0.5)
    assert stderr.getvalue().count("Invalid input") == 3
    assert input_fn.prompts[0] == "Enter image width: "
    assert input_fn.prompts[-1] == "Enter max number of iterations: "
