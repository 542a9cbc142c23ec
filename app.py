import logging
import sys
from PyQt5.QtWidgets import QApplication
from PyQt5.QtGui import QFont
from ml.classifier import BanknoteClassifier
from ml.config import MODEL_PATH
from ui.main_window import MainWindow

if __name__ == "__main__":
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = QApplication(sys.argv)
    app.setFont(QFont("Arial", 10))

    classifier = BanknoteClassifier(sys.argv[1] if len(sys.argv) > 1 else MODEL_PATH)

    window = MainWindow(classifier)
    window.show()

    sys.exit(app.exec_())
