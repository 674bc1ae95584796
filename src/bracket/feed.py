"""
Community feed publisher.

Turns engine events into feed posts and appends them to a YAML file that
the club's community feed reads.
"""
import logging
import os
from datetime import datetime
from typing import Dict, List, Optional

import yaml
from filelock import FileLock

from .events import Event, MatchCompleted, TournamentCompleted, TournamentStarted

logger = logging.getLogger(__name__)

DEFAULT_SCORE_TEXT = 'Win'


def load_feed(feed_file: str) -> List[Dict]:
    """Load feed posts from YAML file."""
    if not os.path.exists(feed_file):
        return []
    with open(feed_file, 'r', encoding='utf-8') as f:
        data = yaml.safe_load(f)
        if not data or 'posts' not in data:
            return []
        return data['posts']


def event_to_post(event: Event, author: Optional[str] = None) -> Dict:
    """Build the feed post for an engine event."""
    post = {
        'group_id': event.group_ref,
        'author': author,
        'created': datetime.now().isoformat(),
    }
    if isinstance(event, TournamentStarted):
        post['type'] = 'tournament_announcement'
        post['content'] = {
            'title': event.tournament_name,
            'group_name': event.metadata.get('group_name'),
            'prize_pool': event.metadata.get('prize_pool'),
            'date': event.metadata.get('date'),
        }
    elif isinstance(event, MatchCompleted):
        post['type'] = 'match'
        post['content'] = {
            'title': event.tournament_name,
            'winner': event.winner_name,
            'loser': event.loser_name,
            'score': event.score or DEFAULT_SCORE_TEXT,
        }
    elif isinstance(event, TournamentCompleted):
        post['type'] = 'tournament_result'
        post['content'] = {
            'tournament_name': event.tournament_name,
            'winner_name': event.champion_name,
            'winner_avatar': event.champion_avatar_ref,
        }
    else:
        raise ValueError(f'Unsupported event {event.kind}')
    return post


class FeedPublisher:
    def __init__(self, feed_file: str, author: Optional[str] = None, lock_timeout: float = 10):
        self.feed_file = feed_file
        self.author = author
        self._lock = FileLock(f'{feed_file}.lock', timeout=lock_timeout)

    def publish(self, event: Event):
        post = event_to_post(event, self.author)
        directory = os.path.dirname(self.feed_file)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with self._lock:
            posts = load_feed(self.feed_file)
            posts.append(post)
            with open(self.feed_file, 'w', encoding='utf-8') as f:
                yaml.safe_dump({'posts': posts}, f, default_flow_style=False, allow_unicode=True, sort_keys=False)
        logger.debug(f'Posted {post["type"]} for tournament {event.tournament_id}')
