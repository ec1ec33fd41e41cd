import redis
from app.utils.retry import redis_retry
from app.utils.settings import REDIS_URL
from app.utils.logging import get_logger

logger = get_logger(__name__)

#LUA porownaj i usun, atomicity
_RELEASE_LUA = """
if redis.call('GET', KEYS[1]) == ARGV[1] then
    return redis.call('DEL', KEYS[1])
else
    return 0
end
"""

#redis wykonuje atomowo przez lua, skrypt dziala jako jedna nieprzerywalna operacja
#nie mozna wcisnac sie miedzy GET a DEL, wiec zwalnia tylko wlasciciel locka


class LockService:
    """
    -blokada koszyka uzytkownika na czas jednej mutacji
    -zwalnianie locka tylko przez wlasciciela (token)
    -atomowosc przy pomocy lua
    """

    def __init__(self, url: str | None = None, client: redis.Redis | None = None):
        self.redis = client or redis.Redis.from_url(
            url or REDIS_URL,
            decode_responses=True,
        )

    @staticmethod
    def _key(email: str) -> str:
        return f"cart:{email}:lock"

    @redis_retry()
    def acquire_cart_lock(self, email: str, token: str, ttl: int) -> bool:
        key = self._key(email)
        logger.info(f"Acquire lock {key}")
        #SET cart:a@b.c:lock "<token>" NX EX 10
        return bool(self.redis.set(name=key, value=token, nx=True, ex=ttl))

    @redis_retry()
    def release_cart_lock(self, email: str, token: str) -> bool:
        key = self._key(email)
        logger.info(f"Release lock {key}")
        res = self.redis.eval(_RELEASE_LUA, 1, key, token)
        return bool(res)
