from empathy_bot.config import Config


def main():
    import uvicorn
    uvicorn.run("empathy_bot.main:app", host=Config.HOST, port=Config.PORT, log_level="info")


if __name__ == "__main__":
    main()
