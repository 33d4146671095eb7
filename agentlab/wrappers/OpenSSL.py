import base64

from invoke import Context


def b64(value: str) -> str:
    return base64.b64encode(value.encode('utf-8')).decode('utf-8')


class OpenSSL:

    _ctx: Context
    _echo: bool

    def __init__(self, ctx: Context, echo: bool = False):
        self._ctx = ctx
        self._echo = echo

    def rand_base64(self, num_bytes: int = 32) -> str:
        return self._ctx.run(
            "openssl rand -base64 {}".format(num_bytes),
            hide='stdout', echo=self._echo).stdout.strip()

    def secret_key_b64(self) -> str:
        """
        Random key, base64 encoded once more to fit a Secret's data field
        """
        return b64(self.rand_base64())
