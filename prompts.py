#!/usr/bin/env python3
import getpass

REQUIRED_MESSAGE = "This field is required."


def validate_input(raw, required=True):
    """Проверяет введённое значение.
    Возвращает строку без перевода строки в конце или None, если обязательное поле пустое."""
    value = (raw or "").rstrip("\r\n")
    if required and value == "":
        return None
    return value


def prompt(question, required=True, reader=input):
    """Запрашивает значение, пока обязательное поле не будет заполнено."""
    while True:
        value = validate_input(reader(f"{question}: "), required)
        if value is not None:
            return value
        print(REQUIRED_MESSAGE)


def prompt_secret(question, required=True, reader=getpass.getpass):
    return prompt(question, required, reader=reader)
