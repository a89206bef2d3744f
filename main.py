from typing import Annotated

from rich.pretty import pprint

from labyrinth import *

__prog__ = "demo"


class Greeter:
    @command("greet ?", "hi ?")
    def greet(self, caller: str, name: Annotated[str, MaxLength(16)]):
        return "%s greets %s" % (caller, name)

    @command("give ? ?", "give ? ~ ?")
    def give(self, caller: str, name: str, amount: Annotated[int, Range(min=1)]):
        return "%s gives %d to %s" % (caller, amount, name)


if __name__ == '__main__':
    router = Router()
    router.include(Greeter())
    pprint(router.execute("console", "give timmy ~ 55"))
    pprint(router.complete("gr"))
    invoke(router, "console", "give timmy 0", hint="amounts start at 1")
