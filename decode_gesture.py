#!/usr/bin/env python3
"""
Decode a recorded gesture offline.

Reads a JSON list of samples ({"key", "x", "y", "t"}), or a plain key
string laid out on the default QWERTY map, and prints the signature, the
dictionary candidates and the SHARK2 ranking.

Usage:
    python decode_gesture.py --keys qwerttty
    python decode_gesture.py --samples gesture.json --dictionary words.txt
    python decode_gesture.py --keys hjello --learn hello --patterns ~/.swipekeys
"""

import argparse
import asyncio
import json
import os
import sys

from dotenv import load_dotenv
load_dotenv()

sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from swipekeys.config import DecoderConfig, KeyboardConfig, Shark2Config, PatternCacheConfig
from swipekeys.keyboard import QWERTYKeyboard
from swipekeys.dictionary import frequency_dictionary, load_dictionary
from swipekeys.trajectory import Point, segment_trajectory
from swipekeys.anchors import extract_signature, is_tap
from swipekeys.candidates import CandidateFilter
from swipekeys.pattern_cache import FileStore, PatternCache
from swipekeys.scorer import ScoreRequest
from swipekeys.shark2 import Shark2Scorer


def parse_args():
    parser = argparse.ArgumentParser(
        description='Decode a gesture-typing trajectory',
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )

    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument('--samples', type=str,
                        help='JSON file with a list of {key, x, y, t} samples')
    source.add_argument('--keys', type=str,
                        help='Key stream laid out on the default QWERTY map, 50ms apart')

    parser.add_argument('--dictionary', type=str, default=None,
                        help='Word list (one per line, most common first); defaults to wordfreq')
    parser.add_argument('--dictionary_size', type=int, default=5000,
                        help='Number of wordfreq words when no word list is given')
    parser.add_argument('--patterns', type=str, default=None,
                        help='Directory holding learned patterns')
    parser.add_argument('--learn', type=str, default=None,
                        help='Store this word for the gesture in the pattern cache')

    return parser.parse_args()


def load_samples(path: str):
    with open(path, 'r') as f:
        raw = json.load(f)
    return [
        Point.from_key(s['key'], float(s['x']), float(s['y']), float(s['t'])) if s.get('key')
        else Point(x=float(s['x']), y=float(s['y']), t=float(s['t']))
        for s in raw
    ]


async def main():
    args = parse_args()

    decoder_config = DecoderConfig.from_env()
    keyboard = QWERTYKeyboard(KeyboardConfig.from_env())
    key_map = keyboard.key_map()

    if args.samples:
        trajectory = load_samples(args.samples)
    else:
        trajectory = keyboard.trajectory_for_keys(args.keys)

    print(f'Samples: {len(trajectory)}')
    if is_tap(trajectory, decoder_config):
        print('Too short for a swipe; typed literally.')
        return

    signature = extract_signature(segment_trajectory(trajectory), decoder_config)
    print(f'Sequence: {signature.sequence}')
    print(f'Anchors:  {"-".join(signature.anchors)}')

    cache = None
    if args.patterns:
        cache = PatternCache(FileStore(os.path.expanduser(args.patterns)), PatternCacheConfig.from_env())
        await cache.load()
        cached = cache.lookup(signature.sequence)
        if cached:
            print(f'Learned pattern: {cached}')

    if args.dictionary:
        dictionary = load_dictionary(args.dictionary)
    else:
        dictionary = frequency_dictionary(args.dictionary_size)
    print(f'Dictionary: {len(dictionary)} words')

    candidates = CandidateFilter(dictionary, key_map, decoder_config).filter(trajectory, signature.anchors)
    print(f'Candidates ({len(candidates)}): {", ".join(candidates) if candidates else "-"}')

    scorer = Shark2Scorer(key_map, Shark2Config.from_env())
    result = await scorer.score(ScoreRequest(
        trajectory=tuple(trajectory),
        anchors=signature.anchors,
        candidates=tuple(candidates),
        sequence=signature.sequence,
    ))
    print(f'Ranking: {", ".join(result.predictions) if result.predictions else "-"}')

    if args.learn:
        if cache is None:
            print('--learn needs --patterns')
        else:
            cache.learn(signature.sequence, args.learn)
            await cache.flush()
            print(f'Stored {signature.sequence} -> {args.learn}')


if __name__ == '__main__':
    asyncio.run(main())
