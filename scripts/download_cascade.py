import argparse
import sys
from pathlib import Path

import requests

from plate_audit.resources import CASCADE_FILENAME, CASCADE_URL, download_cascade


def main():
    parser = argparse.ArgumentParser(description='Download a Haar cascade XML for plate detection')
    parser.add_argument('--url', default=CASCADE_URL, help='Direct URL to the cascade .xml file')
    parser.add_argument('--out', default=str(Path('models') / CASCADE_FILENAME), help='Destination path')
    args = parser.parse_args()

    print(f'Downloading cascade from {args.url} -> {args.out}')
    try:
        dest = download_cascade(args.url, args.out)
    except requests.RequestException as e:
        print('Download failed:', e)
        sys.exit(1)
    print('Done. Use it with: plate-audit --input car.jpg --cascade', dest)


if __name__ == '__main__':
    main()
