import uvicorn

from image_archiver.config import load_config


def main():
    config = load_config()
    uvicorn.run("image_archiver.main:app", host="0.0.0.0", port=config.port)


if __name__ == "__main__":
    main()
