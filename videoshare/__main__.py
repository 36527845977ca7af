from videoshare.server import main

main()
