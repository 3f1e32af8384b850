"""Send a markdown card to a chat and list the chats the bot belongs to.

Usage:
    LARK_ACCESS_TOKEN=t-xxx python examples/send_markdown.py oc_xxx
"""

import os
import sys

from lark_client import ClientConfig, LarkClient, StaticTokenProvider, setup_logging


def main() -> int:
    if len(sys.argv) != 2:
        print(__doc__)
        return 1

    config = ClientConfig()
    setup_logging(config.logging)

    token_provider = StaticTokenProvider(os.environ["LARK_ACCESS_TOKEN"])
    with LarkClient(config, token_provider=token_provider) as client:
        result = client.send_markdown_message(
            "**Nightly build** finished in 12m",
            receive_id=sys.argv[1],
            receive_id_type="chat_id",
            title="CI",
            buttons={"Open build": "https://ci.example.com/builds/latest"},
        )
        result.raise_for_code()
        print(f"Sent message {result.payload.get('message_id')}")

        for chat in client.iter_chats(page_size=50):
            print(f"{chat['chat_id']}  {chat.get('name', '')}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
