"""Example: talk to a running server through the client package.

Logs in as the demo worker, posts a comment and prints the chat feed.
"""

import logging
import os

from src.task_tracker.task_tracker.client.base import ApiClient
from src.task_tracker.task_tracker.client.comment_client import AuthClient, CommentClient
from src.task_tracker.task_tracker.client.worker_chat import WorkerChat


def main():
    logging.basicConfig(level=logging.INFO)
    subdomain = os.getenv("DEMO_SUBDOMAIN", "acme")

    api = ApiClient(os.getenv("API_URL", "http://localhost:5000"))
    AuthClient(api).login(subdomain, "worker", "worker123")

    chat = WorkerChat(CommentClient(api), subdomain)
    chat.send("Hello from the example script")
    for day in chat.grouped_by_day():
        print(day.label)
        for message in day.messages:
            print(f"  [{message.sender.value}] {message.text}")
    print("unread admin replies:", chat.unread_admin_count)


if __name__ == "__main__":
    main()
