from rich.pretty import pprint

from switchyard import *

application = Application("switchyard", "0.0.0")


@command("greet", aliases=["hi"], descr="Greet somebody")
def greet(input, console):
    """
    Print a greeting for every given name.
    """
    for name in input.argument("names") or ["world"]:
        console.print(f"{input.option('greeting')}, {name}!")


greet.add_argument("names", ArgumentMode.IS_ARRAY, "Who to greet")
greet.add_option("--greeting", "-g", OptionMode.VALUE_REQUIRED, "The greeting", "Hello")


if __name__ == '__main__':
    application.add(greet)
    pprint(greet)
    invoke(application)
