from helmsman import *

__prog__ = "console"


class Greet(Command):

    def configure(self):
        self.set_name("greet").set_description("Say hello to someone")
        self.add_argument("name").required().description("Who to greet")
        self.add_option("shout").shortcuts("s").default(False).description("Greet loudly")

    def run(self):
        text = "hello %s" % self.argument("name")
        self.console.print(text.upper() if self.option("shout") else text)


class Seed(Command):

    def configure(self):
        self.set_name("db:seed").set_description("Seed the database")
        self.add_option("count", lambda option: option.shortcut("c").default(10).description("Rows per table"))

    async def run(self):
        await self.run_command("greet", {"arguments": {"name": "seeder"}})
        self.console.print("seeded %d rows" % self.option("count"))


application = Application("Console", "1.0.0")
application.add_commands([Greet(), Seed()])
application.register("work", lambda command: command.set_description("Do the work").set_handler(
    lambda command: command.console.print("working")
))


if __name__ == '__main__':
    application.run()
